DOWNLOADABLE = "downloadable"
CUSTOM = "custom"

PRODUCT_TYPES = [DOWNLOADABLE, CUSTOM]
