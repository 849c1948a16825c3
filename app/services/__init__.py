"""Services package."""

from app.services.rest_data_service import RestDataService
from app.services.session import SessionContext
from app.services.sql_data_service import SqlDataService

__all__ = ["RestDataService", "SessionContext", "SqlDataService"]
