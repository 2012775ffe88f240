PENDING = "pending"
ACTIVE = "active"
SUSPENDED = "suspended"
CANCELLED = "cancelled"

# lifecycle action -> (statuses it may start from, resulting status)
ALLOWED_TRANSITIONS = {
    "activate": (["pending"], ACTIVE),
    "renew": (["active"], ACTIVE),
    "suspend": (["active"], SUSPENDED),
    "unsuspend": (["suspended"], ACTIVE),
    "cancel": (["pending", "active", "suspended"], CANCELLED),
    "uncancel": (["cancelled"], ACTIVE),
}
