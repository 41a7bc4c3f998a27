"""
Docs Wallet Backend — Work Schemas
===================================

Work bodies are free-form, so only the write acknowledgements are modelled.
"""

from pydantic import BaseModel


class WorkInsertResponse(BaseModel):
    acknowledged: bool = True
    insertedId: str


class WorkDeleteResponse(BaseModel):
    acknowledged: bool = True
    deletedCount: int
