# Farmers module
from app.modules.farmers.models import Farmer, FarmerRecommendation, CropType, FarmerLoanStatus
from app.modules.farmers.router import router

__all__ = ["Farmer", "FarmerRecommendation", "CropType", "FarmerLoanStatus", "router"]
