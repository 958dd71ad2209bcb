from pydantic import BaseModel, ConfigDict, Field


class DashboardStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(..., alias="totalUsers")
    total_stores: int = Field(..., alias="totalStores")
    total_ratings: int = Field(..., alias="totalRatings")
