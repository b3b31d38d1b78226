"""Tests for the offer catalogue endpoints."""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

from app.errors import RemoteOperationError
from app.models.activity import ContentAccess
from app.models.offer import Offer
from app.models.criativo import Criativo
from app.models.landing_page import LandingPage

OLD_THUMB = "http://localhost:8000/storage/thumbnails/old.png"
NEW_THUMB = "http://localhost:8000/storage/thumbnails/new.png"


def _make_offer(id=1, title="Keto Max", **kwargs):
    offer = Mock(spec=Offer)
    offer.id = id
    offer.title = title
    offer.thumbnail = kwargs.get("thumbnail", OLD_THUMB)
    offer.drive_link = "https://drive.test/keto"
    offer.tipo = kwargs.get("tipo", "VSL")
    offer.estrutura = kwargs.get("estrutura")
    offer.idioma = kwargs.get("idioma", "pt")
    offer.nicho = kwargs.get("nicho", "saude")
    offer.trafego = kwargs.get("trafego", "facebook")
    offer.created_at = datetime.now(timezone.utc)
    return offer


def _assign_id(offer):
    offer.id = 5
    offer.created_at = datetime.now(timezone.utc)


class TestListOffers:
    def test_member_lists_with_filters(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.all.return_value = [
            _make_offer(1, "Keto Max", nicho="saude"),
            _make_offer(2, "Keto Cash", nicho="financas"),
            _make_offer(3, "Detox", nicho="saude"),
        ]

        response = client.get("/ofertas", params={"search": "keto", "nicho": "saude"})

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [1]

    def test_expired_member_is_blocked(self, client_with_member):
        client, _, member = client_with_member
        member.expires_at = datetime.now(timezone.utc) - timedelta(days=1)

        response = client.get("/ofertas")

        assert response.status_code == 403
        detail = response.json()["detail"]
        assert detail["status"] == "expired"
        assert "expirou" in detail["message"]

    def test_paused_member_is_blocked(self, client_with_member):
        client, _, member = client_with_member
        member.paused = True

        response = client.get("/ofertas")

        assert response.status_code == 403
        assert response.json()["detail"]["status"] == "paused"

    def test_admin_bypasses_subscription(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.all.return_value = [_make_offer()]
        response = client.get("/ofertas")
        assert response.status_code == 200

    def test_filter_options(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.all.return_value = [
            _make_offer(1, idioma="pt", nicho="saude"),
            _make_offer(2, idioma="es", nicho="saude"),
            _make_offer(3, idioma="pt", nicho=None),
        ]

        response = client.get("/ofertas/filters")

        assert response.status_code == 200
        data = response.json()
        assert data["idioma"] == ["es", "pt"]
        assert data["nicho"] == ["saude"]
        assert data["estrutura"] == []


class TestOfferDetail:
    def test_detail_with_creatives_and_pages_records_access(self, client_with_member):
        client, mock_db, member = client_with_member
        offer = _make_offer()
        criativo = Mock(spec=Criativo)
        criativo.id, criativo.title, criativo.drive_link = 3, "Video 1", "https://drive.test/v1"
        criativo.nicho, criativo.trafego, criativo.idioma = "saude", None, "pt"
        page = Mock(spec=LandingPage)
        page.id, page.title, page.page_url = 4, "LP Keto", "https://lp.test"

        mock_db.first.return_value = offer
        mock_db.all.side_effect = [[criativo], [page]]

        response = client.get("/ofertas/1")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Keto Max"
        assert data["criativos"][0]["title"] == "Video 1"
        assert data["landing_pages"][0]["page_url"] == "https://lp.test"

        access = mock_db.add.call_args[0][0]
        assert isinstance(access, ContentAccess)
        assert access.user_id == member.id
        assert access.content_id == 1
        mock_db.commit.assert_called_once()

    def test_detail_survives_tracking_failure(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.first.return_value = _make_offer()
        mock_db.begin_nested.side_effect = Exception("db down")

        response = client.get("/ofertas/1")

        assert response.status_code == 200

    def test_detail_not_found(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.first.return_value = None
        response = client.get("/ofertas/99")
        assert response.status_code == 404


class TestCreateOffer:
    def test_create_uploads_thumbnail_then_inserts(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.refresh = Mock(side_effect=_assign_id)

        with patch("app.routers.offers.blob_storage.upload_blob", return_value=NEW_THUMB) as mock_upload:
            response = client.post(
                "/ofertas",
                data={"title": "Keto Max", "drive_link": "https://drive.test/keto", "nicho": "saude", "tipo": " "},
                files={"thumbnail": ("capa.png", b"PNG data", "image/png")},
            )

        assert response.status_code == 201
        data = response.json()
        assert data["thumbnail"] == NEW_THUMB
        assert data["nicho"] == "saude"
        assert data["tipo"] is None
        mock_upload.assert_called_once_with(b"PNG data", "capa.png")
        mock_db.add.assert_called_once()

    def test_create_requires_thumbnail(self, client_with_admin):
        client, _, _ = client_with_admin
        response = client.post("/ofertas", data={"title": "Keto", "drive_link": "https://drive.test"})
        assert response.status_code == 422

    def test_create_rejects_non_image(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        response = client.post(
            "/ofertas",
            data={"title": "Keto", "drive_link": "https://drive.test"},
            files={"thumbnail": ("notes.txt", b"text", "text/plain")},
        )
        assert response.status_code == 400
        mock_db.add.assert_not_called()

    def test_upload_failure_is_transient_error(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        with patch("app.routers.offers.blob_storage.upload_blob", side_effect=RemoteOperationError("upload_blob", "down")):
            response = client.post(
                "/ofertas",
                data={"title": "Keto", "drive_link": "https://drive.test"},
                files={"thumbnail": ("capa.png", b"PNG", "image/png")},
            )

        assert response.status_code == 502
        mock_db.add.assert_not_called()

    def test_member_cannot_create(self, client_with_member):
        client, _, _ = client_with_member
        response = client.post(
            "/ofertas",
            data={"title": "Keto", "drive_link": "https://drive.test"},
            files={"thumbnail": ("capa.png", b"PNG", "image/png")},
        )
        assert response.status_code == 403


class TestUpdateOffer:
    def test_replacing_thumbnail_releases_old_blob_after_commit(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        offer = _make_offer()
        mock_db.first.return_value = offer
        calls = []
        mock_db.commit.side_effect = lambda: calls.append("commit")

        with patch("app.routers.offers.blob_storage.upload_blob", return_value=NEW_THUMB):
            with patch("app.routers.offers.blob_storage.delete_blob", side_effect=lambda url: calls.append(("delete", url))):
                response = client.patch(
                    "/ofertas/1",
                    data={"title": "Keto Max 2"},
                    files={"thumbnail": ("nova.jpg", b"JPG", "image/jpeg")},
                )

        assert response.status_code == 200
        assert offer.title == "Keto Max 2"
        assert offer.thumbnail == NEW_THUMB
        assert calls == ["commit", ("delete", OLD_THUMB)]

    def test_failed_release_leaves_orphan_but_succeeds(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        offer = _make_offer()
        mock_db.first.return_value = offer

        with patch("app.routers.offers.blob_storage.upload_blob", return_value=NEW_THUMB):
            with patch("app.routers.offers.blob_storage.delete_blob", side_effect=RemoteOperationError("delete_blob")):
                response = client.patch(
                    "/ofertas/1",
                    files={"thumbnail": ("nova.jpg", b"JPG", "image/jpeg")},
                )

        assert response.status_code == 200
        assert offer.thumbnail == NEW_THUMB

    def test_update_without_thumbnail_keeps_blob(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        offer = _make_offer()
        mock_db.first.return_value = offer

        with patch("app.routers.offers.blob_storage.delete_blob") as mock_delete:
            response = client.patch("/ofertas/1", data={"idioma": "es"})

        assert response.status_code == 200
        assert offer.idioma == "es"
        mock_delete.assert_not_called()


class TestDeleteOffer:
    def test_delete_row_then_blob(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        offer = _make_offer()
        mock_db.first.return_value = offer

        with patch("app.routers.offers.blob_storage.delete_blob", return_value=True) as mock_delete:
            response = client.delete("/ofertas/1")

        assert response.status_code == 204
        mock_db.delete.assert_called_once_with(offer)
        mock_delete.assert_called_once_with(OLD_THUMB)

    def test_delete_not_found(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.first.return_value = None
        response = client.delete("/ofertas/99")
        assert response.status_code == 404
