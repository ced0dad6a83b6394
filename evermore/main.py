import logging

import uvicorn

from config import HOST, PORT
from logging_setup import setup_logging
from api.app import app
from api.budget.routes import budget_router
from api.calendar.routes import calendar_router
from api.checklist.routes import checklist_router
from api.dashboard.routes import dashboard_router
from api.guests.routes import guests_router
from api.inspiration.routes import inspiration_router
from api.vendors.routes import vendors_router
from api.weddings.routes import weddings_router
from live_view.service import websocket_endpoint

setup_logging()

logging.info("Application starting up...")

# Include routers
app.include_router(weddings_router, prefix="/weddings", tags=["Weddings"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
app.include_router(budget_router, prefix="/budget", tags=["Budget"])
app.include_router(guests_router, prefix="/guests", tags=["Guests"])
app.include_router(checklist_router, prefix="/checklist", tags=["Checklist"])
app.include_router(calendar_router, prefix="/calendar", tags=["Calendar"])
app.include_router(inspiration_router, prefix="/inspiration", tags=["Inspiration"])
app.include_router(vendors_router, prefix="/vendors", tags=["Vendors"])

# Register WebSocket endpoint
app.websocket("/ws")(websocket_endpoint)

if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
