from servicedownloadable.models.user import User
from servicedownloadable.models.product import Product
from servicedownloadable.models.client_order import ClientOrder
from servicedownloadable.models.service_downloadable import ServiceDownloadable

# add ALL models here
