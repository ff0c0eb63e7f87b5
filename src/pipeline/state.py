from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional, Literal
from providers.base import ProviderResult

LOOKUP_FAILED = "Failed to fetch submissions for deletion."
CREATE_FAILED = "Failed to create new submission."

Stage = Literal["lookup", "create"]


class SubmissionQuery(BaseModel):
    key: Optional[str] = None
    archived: Optional[bool] = None
    limit: int = 100

    def params(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.key:
            out["q"] = self.key
        if self.archived is not None:
            out["archived"] = "true" if self.archived else "false"
        out["limit"] = self.limit
        return out


class DeletionOutcome(BaseModel):
    id: Any
    status: Literal["fulfilled", "rejected"]
    value: Optional[ProviderResult] = None
    reason: Any = None


class ReconcileState(BaseModel):
    query: SubmissionQuery
    request: Dict[str, Any] = Field(default_factory=dict)
    submissions: List[Dict[str, Any]] = Field(default_factory=list)
    deleted: List[DeletionOutcome] = Field(default_factory=list)
    payload: Dict[str, Any] = Field(default_factory=dict)
    submission: Any = None
    failure: Optional[ProviderResult] = None
    failed_stage: Optional[Stage] = None
    message: Optional[str] = None


class ReconciliationReport(BaseModel):
    submission: Any = None
    deleted: List[DeletionOutcome] = Field(default_factory=list)
    error: Any = None
    message: Optional[str] = None
    failed_stage: Optional[Stage] = None
    status: int = 200

    @property
    def ok(self) -> bool:
        return self.failed_stage is None

    def body(self) -> Dict[str, Any]:
        deleted = [d.model_dump() for d in self.deleted]
        if not self.ok:
            out: Dict[str, Any] = {"error": self.error, "message": self.message}
            if self.failed_stage == "create":
                out["deleted"] = deleted
            return out
        return {"submission": self.submission, "deleted": deleted}
