from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from typing import Any, Dict, List, Literal, Optional, Union

class ApplicationIn(BaseModel):
    # ids optional so a missing one surfaces as a LoadError; strict so true or "0.5" is a 422, not coerced
    user_id: Optional[Union[StrictStr, StrictInt]] = None
    target_user_id: Optional[Union[StrictStr, StrictInt]] = None
    priority: Optional[Union[StrictInt, StrictFloat]] = None

class BuildGraphIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    applications: List[ApplicationIn] = Field(default_factory=list)
    users_by_id: Dict[str, Any] = Field(default_factory=dict, alias="usersById")

class BuildGraphOut(BaseModel):
    status: Literal["OK"] = "OK"
    nodes: int
    relationships: int

class ChainOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    people: List[str]
    length: int
    avg_priority: Optional[float] = Field(default=None, alias="avgPriority")

class ChainsOut(BaseModel):
    status: Literal["OK"] = "OK"
    chains: List[ChainOut]

class RelationshipOut(BaseModel):
    from_name: str
    to_name: str
    priority: Optional[float] = None

class SummaryOut(BaseModel):
    status: Literal["OK"] = "OK"
    relationships: List[RelationshipOut]

class StatusOut(BaseModel):
    status: str
    graph: Optional[str] = None
    generation: Optional[int] = None
    message: Optional[str] = None
