"""
API request/response schemas.

Pydantic models that define the contract between the TowGo API and its
clients. Database entities never leave the server directly; routers convert
them with ``model_validate`` into the ``*Read`` models here.
"""
