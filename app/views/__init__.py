"""View models behind the dashboard screen and its dialogs."""

from app.views.dashboard import DashboardView
from app.views.dialogs import CreateLeagueDialog, JoinLeagueDialog
from app.views.navigation import Navigator

__all__ = ["DashboardView", "CreateLeagueDialog", "JoinLeagueDialog", "Navigator"]
