import json

import pytest

from servicedownloadable.constants.order_status import ACTIVE, CANCELLED, PENDING, SUSPENDED
from servicedownloadable.exceptions import BusinessRuleError, ConfigurationError, NotFoundError
from servicedownloadable.models import ClientOrder, Product, ServiceDownloadable


@pytest.fixture
def custom_product(session) -> Product:
    product = Product(title="Consulting hour", slug="consulting-hour", type="custom")
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


class TestCreateOrder:

    def test_copies_product_file_into_order(self, lifecycle, client_user, configured_product):
        order = lifecycle.create_order(client_user.id, configured_product.id, {"note": "rush"})

        assert order.status == PENDING
        assert order.product_type == "downloadable"
        assert order.title == configured_product.title
        assert order.service_id is None

        config = json.loads(order.config)
        assert config["filename"] == "invoice.pdf"
        assert config["note"] == "rush"

    def test_unconfigured_product(self, lifecycle, client_user, product):
        with pytest.raises(ConfigurationError, match="Product is not configured completely."):
            lifecycle.create_order(client_user.id, product.id)

    def test_unknown_client(self, lifecycle, configured_product):
        with pytest.raises(NotFoundError, match="Client not found"):
            lifecycle.create_order(99999, configured_product.id)

    def test_unknown_product(self, lifecycle, client_user):
        with pytest.raises(NotFoundError, match="Product not found"):
            lifecycle.create_order(client_user.id, 99999)

    def test_custom_product_needs_no_file(self, lifecycle, client_user, custom_product):
        order = lifecycle.create_order(client_user.id, custom_product.id)
        assert json.loads(order.config) == {}


class TestActivateOrder:

    def test_binds_service_record(self, lifecycle, client_user, configured_product):
        order = lifecycle.create_order(client_user.id, configured_product.id)

        lifecycle.activate_order(order)

        assert order.status == ACTIVE
        assert order.activated_at is not None
        assert order.service_type == "downloadable"

        record = lifecycle.get_order_service(order)
        assert isinstance(record, ServiceDownloadable)
        assert record.id == order.service_id
        assert record.order_id == order.id
        assert record.client_id == client_user.id
        assert record.filename == "invoice.pdf"
        assert record.downloads == 0

    def test_file_is_snapshotted(self, lifecycle, service, active_order, configured_product):
        service.save_product_config(configured_product, {"filename": "replaced.pdf"})

        assert lifecycle.get_order_service(active_order).filename == "invoice.pdf"

    def test_cannot_activate_twice(self, lifecycle, active_order):
        with pytest.raises(BusinessRuleError, match=f"Order #{active_order.id} is active, cannot activate it"):
            lifecycle.activate_order(active_order)

    def test_order_config_without_file(self, lifecycle, session, client_user, configured_product):
        order = ClientOrder(
            client_id=client_user.id,
            product_id=configured_product.id,
            product_type="downloadable",
            title="Broken",
            config="{}",
        )
        session.add(order)
        session.commit()
        session.refresh(order)

        with pytest.raises(ConfigurationError, match=f"Order #{order.id} config is missing"):
            lifecycle.activate_order(order)

        assert order.status == PENDING
        assert lifecycle.get_order_service(order) is None

    def test_custom_product_has_no_service(self, lifecycle, client_user, custom_product):
        order = lifecycle.create_order(client_user.id, custom_product.id)

        lifecycle.activate_order(order)

        assert order.status == ACTIVE
        assert lifecycle.get_order_service(order) is None


class TestStatusTransitions:

    def test_suspend_and_unsuspend(self, lifecycle, active_order, order_service):
        lifecycle.suspend_order(active_order)
        assert active_order.status == SUSPENDED

        lifecycle.unsuspend_order(active_order)
        assert active_order.status == ACTIVE
        assert lifecycle.get_order_service(active_order).id == order_service.id

    def test_renew_keeps_active(self, lifecycle, active_order):
        lifecycle.renew_order(active_order)
        assert active_order.status == ACTIVE

    def test_cancel_and_uncancel(self, lifecycle, active_order, order_service):
        lifecycle.cancel_order(active_order)
        assert active_order.status == CANCELLED

        lifecycle.uncancel_order(active_order)
        assert active_order.status == ACTIVE
        assert lifecycle.get_order_service(active_order).id == order_service.id

    def test_cancel_pending(self, lifecycle, client_user, configured_product):
        order = lifecycle.create_order(client_user.id, configured_product.id)
        lifecycle.cancel_order(order)
        assert order.status == CANCELLED

    def test_uncancel_pending_order_binds_service(self, lifecycle, service, client_user, configured_product, write_blob):
        write_blob("invoice.pdf")
        order = lifecycle.create_order(client_user.id, configured_product.id)
        lifecycle.cancel_order(order)

        lifecycle.uncancel_order(order)

        assert order.status == ACTIVE
        assert order.activated_at is not None
        record = lifecycle.get_order_service(order)
        assert isinstance(record, ServiceDownloadable)
        assert record.filename == "invoice.pdf"

        assert service.send_file(order.id, client_user.id).filename == "invoice.pdf"
        assert record.downloads == 1

    def test_uncancel_keeps_existing_service(self, lifecycle, session, active_order, order_service):
        activated_at = active_order.activated_at
        lifecycle.cancel_order(active_order)

        lifecycle.uncancel_order(active_order)

        assert active_order.activated_at == activated_at
        assert lifecycle.get_order_service(active_order).id == order_service.id
        assert len(lifecycle.downloadable.services.find(order_id=active_order.id)) == 1

    def test_suspend_pending_is_rejected(self, lifecycle, client_user, configured_product):
        order = lifecycle.create_order(client_user.id, configured_product.id)

        with pytest.raises(BusinessRuleError, match=f"Order #{order.id} is pending, cannot suspend it"):
            lifecycle.suspend_order(order)

        assert order.status == PENDING

    def test_unsuspend_active_is_rejected(self, lifecycle, active_order):
        with pytest.raises(BusinessRuleError, match="cannot unsuspend it"):
            lifecycle.unsuspend_order(active_order)


class TestDeleteOrder:

    def test_removes_order_and_service(self, lifecycle, session, active_order, order_service):
        order_id = active_order.id
        record_id = order_service.id

        lifecycle.delete_order(active_order)

        session.expire_all()
        assert lifecycle.orders.get_by_id(order_id) is None
        assert session.get(ServiceDownloadable, record_id) is None

    def test_pending_order(self, lifecycle, client_user, configured_product):
        order = lifecycle.create_order(client_user.id, configured_product.id)
        order_id = order.id

        lifecycle.delete_order(order)

        assert lifecycle.orders.get_by_id(order_id) is None


class TestToApiArray:

    def test_admin_view(self, lifecycle, active_order, admin_user):
        result = lifecycle.to_api_array(active_order, identity=admin_user)

        assert result["id"] == active_order.id
        assert result["status"] == ACTIVE
        assert result["config"]["filename"] == "invoice.pdf"
        assert result["service"]["filename"] == "invoice.pdf"
        assert result["service"]["downloads"] == 0

    def test_client_view(self, lifecycle, active_order, client_user):
        result = lifecycle.to_api_array(active_order, identity=client_user)
        assert "downloads" not in result["service"]

    def test_pending_has_no_service(self, lifecycle, client_user, configured_product):
        order = lifecycle.create_order(client_user.id, configured_product.id)
        assert "service" not in lifecycle.to_api_array(order)
