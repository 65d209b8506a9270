"""
Tests for farmer profile CRUD and recommendations
"""
import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.modules.farmers.models import FarmerLoanStatus, CropType
from app.modules.farmers.schemas import FarmerCreate, FarmerUpdate, RecommendationCreate
from app.modules.farmers.services import FarmerService


class TestFarmerService:
    """Service level behaviour"""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_create_farmer_defaults(self, db_session):
        service = FarmerService(db_session)

        farmer = await service.create_farmer(FarmerCreate(
            name="  Sita Devi  ",
            email="SITA@Example.com",
            phone="9123456780",
            land_size=1.5
        ))

        assert farmer.id is not None
        assert farmer.name == "Sita Devi"
        assert farmer.email == "sita@example.com"
        assert farmer.crop_type == CropType.OTHER
        assert farmer.credit_score == 500
        assert farmer.loan_status == FarmerLoanStatus.NONE
        assert farmer.ai_recommendations == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_duplicate_phone_rejected(self, db_session, test_farmer):
        service = FarmerService(db_session)

        with pytest.raises(ValidationError, match="Email or phone already exists"):
            await service.create_farmer(FarmerCreate(
                name="Other",
                email="other@example.com",
                phone=test_farmer.phone,
                land_size=2
            ))

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_null_field_rejected(self, db_session, test_farmer):
        service = FarmerService(db_session)

        with pytest.raises(ValidationError):
            await service.update_farmer(test_farmer.id, FarmerUpdate(name=None, land_size=7))

        farmer = await service.get_farmer(test_farmer.id)
        assert farmer.land_size == 4

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_keeps_own_email(self, db_session, test_farmer):
        service = FarmerService(db_session)

        farmer = await service.update_farmer(
            test_farmer.id,
            FarmerUpdate(email=test_farmer.email, credit_score=810)
        )

        assert farmer.credit_score == 810

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_delete_missing_farmer(self, db_session):
        with pytest.raises(NotFoundError, match="Farmer not found"):
            await FarmerService(db_session).delete_farmer(404)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_delete_blocked_by_loans(self, db_session, test_loan):
        service = FarmerService(db_session)

        with pytest.raises(ValidationError, match="existing loan applications"):
            await service.delete_farmer(test_loan.farmer_id)

        assert await service.get_farmer(test_loan.farmer_id) is not None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_recommendations_in_order(self, db_session, test_farmer):
        service = FarmerService(db_session)

        await service.add_recommendation(test_farmer.id, RecommendationCreate(text="Switch to drip irrigation"))
        farmer = await service.add_recommendation(test_farmer.id, RecommendationCreate(text="Apply for crop insurance"))

        texts = [r.text for r in farmer.ai_recommendations]
        assert texts == ["Switch to drip irrigation", "Apply for crop insurance"]
        assert all(r.timestamp is not None for r in farmer.ai_recommendations)


class TestFarmerAPI:
    """HTTP surface for /api/farmers"""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_create_farmer(self, client, farmer_payload):
        response = await client.post("/api/farmers", json=farmer_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Farmer registered successfully"
        data = body["data"]
        assert data["name"] == "Ramesh Patel"
        assert data["landSize"] == 4
        assert data["cropType"] == "Wheat"
        assert data["creditScore"] == 720
        assert data["loanStatus"] == "None"
        assert data["address"]["district"] == "Rajkot"
        assert data["aiRecommendations"] == []
        assert "createdAt" in data

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_create_ignores_loan_status(self, client, farmer_payload):
        response = await client.post("/api/farmers", json=farmer_payload(loanStatus="Active"))

        assert response.status_code == 201
        assert response.json()["data"]["loanStatus"] == "None"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, farmer_payload, test_farmer):
        response = await client.post("/api/farmers", json=farmer_payload(phone="9000000001"))

        assert response.status_code == 400
        assert response.json()["message"] == "Email or phone already exists"

    @pytest.mark.integration
    @pytest.mark.parametrize("overrides", [
        {"phone": "12345"},
        {"phone": "98765abcde"},
        {"creditScore": 250},
        {"creditScore": 901},
        {"landSize": -1},
        {"email": "not-an-email"},
        {"cropType": "Tobacco"},
        {"name": "   "},
    ])
    @pytest.mark.asyncio
    async def test_invalid_payloads(self, client, farmer_payload, overrides):
        response = await client.post("/api/farmers", json=farmer_payload(**overrides))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation Error"

        listing = await client.get("/api/farmers")
        assert listing.json()["count"] == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_list_farmers(self, client, farmer_payload):
        await client.post("/api/farmers", json=farmer_payload())
        await client.post("/api/farmers", json=farmer_payload(email="b@example.com", phone="9000000002"))

        response = await client.get("/api/farmers")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert len(body["data"]) == 2

        paged = await client.get("/api/farmers", params={"skip": 1, "limit": 1})
        assert paged.json()["count"] == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_farmer_idempotent(self, client, test_farmer):
        first = await client.get(f"/api/farmers/{test_farmer.id}")
        second = await client.get(f"/api/farmers/{test_farmer.id}")

        assert first.status_code == 200
        assert first.json() == second.json()

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_get_missing_farmer(self, client):
        response = await client.get("/api/farmers/999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Farmer not found"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_farmer(self, client, test_farmer):
        response = await client.put(
            f"/api/farmers/{test_farmer.id}",
            json={"landSize": 6.5, "cropType": "Cotton", "loanStatus": "Closed"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["landSize"] == 6.5
        assert data["cropType"] == "Cotton"
        assert data["loanStatus"] == "None"
        assert data["name"] == "Ramesh Patel"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_to_taken_phone(self, client, farmer_payload, test_farmer):
        created = await client.post(
            "/api/farmers",
            json=farmer_payload(email="second@example.com", phone="9000000003")
        )
        other_id = created.json()["data"]["id"]

        response = await client.put(f"/api/farmers/{other_id}", json={"phone": test_farmer.phone})

        assert response.status_code == 400
        assert response.json()["message"] == "Email or phone already exists"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_invalid_credit_score(self, client, test_farmer):
        response = await client.put(f"/api/farmers/{test_farmer.id}", json={"creditScore": 1000})

        assert response.status_code == 400

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_missing_farmer(self, client):
        response = await client.put("/api/farmers/999", json={"landSize": 3})

        assert response.status_code == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_delete_farmer(self, client, test_farmer):
        response = await client.delete(f"/api/farmers/{test_farmer.id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Farmer deleted successfully"

        response = await client.get(f"/api/farmers/{test_farmer.id}")
        assert response.status_code == 404

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_delete_farmer_with_loans(self, client, test_loan):
        response = await client.delete(f"/api/farmers/{test_loan.farmer_id}")

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete farmer with existing loan applications"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_add_recommendation(self, client, test_farmer):
        response = await client.post(
            f"/api/farmers/{test_farmer.id}/recommendations",
            json={"text": "Consider intercropping with pulses"}
        )

        assert response.status_code == 201
        recommendations = response.json()["data"]["aiRecommendations"]
        assert len(recommendations) == 1
        assert recommendations[0]["text"] == "Consider intercropping with pulses"
        assert "timestamp" in recommendations[0]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_add_recommendation_missing_farmer(self, client):
        response = await client.post("/api/farmers/999/recommendations", json={"text": "Irrigate"})

        assert response.status_code == 404
