"""Tests for the landing page endpoints and their tagged association."""
from unittest.mock import Mock

from app.models.criativo import Criativo
from app.models.landing_page import LandingPage, AssociationType, OfferLink, CreativeLink
from app.models.offer import Offer


def _page(id, title, association=None, oferta_title=None, criativo_title=None):
    page = LandingPage(id=id, title=title, page_url=f"https://lp.test/{id}")
    page.association = association
    if oferta_title:
        page.oferta = Offer(id=association.oferta_id, title=oferta_title)
    if criativo_title:
        page.criativo = Criativo(id=association.criativo_id, title=criativo_title)
    return page


def _assign_id(page):
    page.id = 7


class TestListLandingPages:
    def _catalogue(self):
        return [
            _page(1, "LP Keto", OfferLink(1), oferta_title="Keto Max"),
            _page(2, "LP Video", CreativeLink(3), criativo_title="Depoimento Keto"),
            _page(3, "LP solta"),
        ]

    def test_lists_decoded_associations(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.all.return_value = self._catalogue()

        response = client.get("/landing-pages")

        assert response.status_code == 200
        data = response.json()
        assert data[0]["association_type"] == "oferta"
        assert data[0]["oferta_id"] == 1
        assert data[0]["criativo_id"] is None
        assert data[0]["oferta_title"] == "Keto Max"
        assert data[1]["association_type"] == "criativo"
        assert data[1]["criativo_title"] == "Depoimento Keto"
        assert data[2]["association_type"] is None

    def test_search_spans_offer_and_creative_titles(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.all.return_value = self._catalogue()

        response = client.get("/landing-pages", params={"search": "keto"})

        assert [p["id"] for p in response.json()] == [1, 2]

    def test_search_by_url(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.all.return_value = self._catalogue()

        response = client.get("/landing-pages", params={"search": "lp.test/3"})

        assert [p["id"] for p in response.json()] == [3]

    def test_filter_by_association_type(self, client_with_member):
        client, mock_db, _ = client_with_member
        mock_db.all.return_value = self._catalogue()

        assert [p["id"] for p in client.get("/landing-pages", params={"association": "criativo"}).json()] == [2]
        assert [p["id"] for p in client.get("/landing-pages", params={"association": "none"}).json()] == [3]

    def test_inconsistent_row_is_reported(self, client_with_member):
        client, mock_db, _ = client_with_member
        broken = LandingPage(id=9, title="Broken", page_url="https://lp.test/9")
        broken.association_type = AssociationType.OFERTA
        broken.criativo_id = 3
        mock_db.all.return_value = [broken]

        response = client.get("/landing-pages")

        assert response.status_code == 500


class TestCreateLandingPage:
    def test_create_with_offer_association(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.first.return_value = Mock(spec=Offer)
        mock_db.refresh = Mock(side_effect=_assign_id)

        response = client.post("/landing-pages", json={
            "title": "LP Keto",
            "page_url": "https://lp.test/keto",
            "association": {"type": "oferta", "oferta_id": 1},
        })

        assert response.status_code == 201
        created = mock_db.add.call_args[0][0]
        assert created.association_type == AssociationType.OFERTA
        assert created.oferta_id == 1
        assert created.criativo_id is None
        assert response.json()["association_type"] == "oferta"

    def test_create_with_creative_association(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.first.return_value = Mock(spec=Criativo)
        mock_db.refresh = Mock(side_effect=_assign_id)

        response = client.post("/landing-pages", json={
            "title": "LP Video",
            "page_url": "https://lp.test/video",
            "association": {"type": "criativo", "criativo_id": 3},
        })

        assert response.status_code == 201
        created = mock_db.add.call_args[0][0]
        assert created.oferta_id is None
        assert created.criativo_id == 3

    def test_create_unassociated(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.refresh = Mock(side_effect=_assign_id)

        response = client.post("/landing-pages", json={"title": "LP", "page_url": "https://lp.test"})

        assert response.status_code == 201
        assert response.json()["association_type"] is None

    def test_unknown_target(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        mock_db.first.return_value = None

        response = client.post("/landing-pages", json={
            "title": "LP",
            "page_url": "https://lp.test",
            "association": {"type": "criativo", "criativo_id": 99},
        })

        assert response.status_code == 400
        mock_db.add.assert_not_called()

    def test_mismatched_tag_is_rejected(self, client_with_admin):
        client, mock_db, _ = client_with_admin

        response = client.post("/landing-pages", json={
            "title": "LP",
            "page_url": "https://lp.test",
            "association": {"type": "oferta", "criativo_id": 3},
        })

        assert response.status_code == 422

    def test_unknown_tag_is_rejected(self, client_with_admin):
        client, _, _ = client_with_admin
        response = client.post("/landing-pages", json={
            "title": "LP",
            "page_url": "https://lp.test",
            "association": {"type": "produto", "oferta_id": 1},
        })
        assert response.status_code == 422


class TestUpdateLandingPage:
    def test_switch_association(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        page = _page(1, "LP Keto", OfferLink(1))
        mock_db.first.side_effect = [page, Mock(spec=Criativo)]

        response = client.patch("/landing-pages/1", json={"association": {"type": "criativo", "criativo_id": 3}})

        assert response.status_code == 200
        assert page.association == CreativeLink(3)
        assert page.oferta_id is None

    def test_explicit_null_clears_association(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        page = _page(1, "LP Keto", OfferLink(1))
        mock_db.first.return_value = page

        response = client.patch("/landing-pages/1", json={"association": None})

        assert response.status_code == 200
        assert page.association is None

    def test_omitted_association_is_untouched(self, client_with_admin):
        client, mock_db, _ = client_with_admin
        page = _page(1, "LP Keto", OfferLink(1))
        mock_db.first.return_value = page

        response = client.patch("/landing-pages/1", json={"title": "LP Keto 2"})

        assert response.status_code == 200
        assert page.title == "LP Keto 2"
        assert page.association == OfferLink(1)


def test_delete_landing_page(client_with_admin):
    client, mock_db, _ = client_with_admin
    page = _page(1, "LP")
    mock_db.first.return_value = page

    response = client.delete("/landing-pages/1")

    assert response.status_code == 204
    mock_db.delete.assert_called_once_with(page)
