from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from sportsme.config import settings

router = APIRouter(tags=["pages"])

EMAIL_CONFIRMED_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Email confirmed - {app_name}</title>
</head>
<body>
  <main>
    <h1>Email confirmed</h1>
    <p>Your email has been confirmed successfully.</p>
    <p>You can now go back to the SportsMe site and log in with your account.</p>
    <a href="/login">Go to login</a>
  </main>
</body>
</html>
"""


@router.get("/auth/confirmed", response_class=HTMLResponse)
async def email_confirmed():
    """Landing page for the sign-up confirmation link"""
    return EMAIL_CONFIRMED_HTML.format(app_name=settings.app_name)
