"""Root application routes."""

from litestar import get
from litestar.response import Redirect
from litestar.status_codes import HTTP_303_SEE_OTHER

from nap_advisor.core.config import settings


@get("/", include_in_schema=False)
async def root_redirect() -> Redirect:
    """Redirect root to the current nap status."""
    return Redirect(path=f"{settings.api_prefix}/nap-status", status_code=HTTP_303_SEE_OTHER)
