from pydantic import BaseModel, ConfigDict


class UserStatsOut(BaseModel):
    user_id: str
    following_count: int
    followers_count: int

    model_config = ConfigDict(from_attributes=True)
