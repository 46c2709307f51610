"""URL configuration for the Ultimata Shop API."""

from django.urls import include, path

from ultimata.catalog import urls as catalog_urls
from ultimata.core import urls as core_urls
from ultimata.core.views import health_check
from ultimata.discounts import urls as discount_urls
from ultimata.files import urls as file_urls
from ultimata.notifications import urls as notification_urls
from ultimata.orders import urls as order_urls
from ultimata.store import urls as store_urls

# Admin back-office, every view requires an admin AuthContext
admin_urlpatterns = (
    core_urls.admin_urlpatterns
    + catalog_urls.admin_urlpatterns
    + discount_urls.admin_urlpatterns
    + order_urls.admin_urlpatterns
    + notification_urls.admin_urlpatterns
    + file_urls.admin_urlpatterns
)

api_urlpatterns = (
    catalog_urls.urlpatterns
    + store_urls.urlpatterns
    + discount_urls.urlpatterns
    + order_urls.urlpatterns
    + notification_urls.urlpatterns
    + file_urls.urlpatterns
)

urlpatterns = [
    # Health check
    path("health/", health_check, name="health_check"),

    # Accounts
    path("api/auth/", include(core_urls.auth_urlpatterns)),

    # Admin API
    path("api/admin/", include(admin_urlpatterns)),

    # Shopper API
    path("api/", include(api_urlpatterns)),
]
