"""FastAPI application factory."""

import hmac
import logging
from pathlib import Path
from urllib.parse import urljoin

from fastapi import Depends, FastAPI, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from markupsafe import Markup, escape
from starlette.exceptions import HTTPException as StarletteHTTPException

from pill_reserves.app_logging import configure_logging
from pill_reserves.containers import AppContainer
from pill_reserves.domain.rational import Rational
from pill_reserves.services.commands import CommandValidationError
from pill_reserves.services.ledger import LedgerError

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SERVER_ERROR_MESSAGE = "500 Something Went Wrong On The Server"
FORBIDDEN_MESSAGE = "403 Forbidden; token missing or invalid"

logger = logging.getLogger(__name__)


def br(value: object) -> Markup:
    """Escape text and turn its newlines into line breaks."""
    return Markup(escape(str(value)).replace("\n", Markup("<br/>\n")))


def frac2str(value: Rational) -> str:
    """Render a fraction in its canonical form."""
    return value.to_canonical_string()


def frac2float(value: Rational) -> float:
    """Render a fraction as a float for display."""
    return value.to_float()


def build_templates() -> Jinja2Templates:
    """Create the template renderer with the ledger filters registered."""
    templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))
    templates.env.filters["br"] = br
    templates.env.filters["frac2str"] = frac2str
    templates.env.filters["frac2float"] = frac2float
    return templates


def require_token(request: Request, token: str | None = Query(default=None)) -> None:
    """Ensure requests carry one of the configured access tokens."""
    container: AppContainer = request.app.state.container
    if not token or not _token_matches(token, container.settings.auth_tokens):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE
        )


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    templates = build_templates()

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(StarletteHTTPException)
    async def plain_text_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> PlainTextResponse:
        return PlainTextResponse(
            str(exc.detail), status_code=exc.status_code, headers=exc.headers
        )

    images_path = Path(container.settings.images_path)
    if images_path.is_dir():
        app.mount("/images", StaticFiles(directory=images_path), name="images")
    else:
        logger.warning(
            "Images directory missing, not serving images",
            extra={"images_path": str(images_path)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse, dependencies=[Depends(require_token)])
    def show_ledger(
        request: Request,
        columns: str | None = Query(default=None),
        hide_ui: str | None = Query(default=None, alias="hide-ui"),
    ) -> HTMLResponse:
        """Render every visible drug with its week counts."""
        state_container: AppContainer = request.app.state.container
        try:
            drugs_to_display = state_container.projection_service.list_visible()
        except LedgerError as exc:
            logger.exception("Failed to load ledger for display")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=SERVER_ERROR_MESSAGE,
            ) from exc
        return templates.TemplateResponse(
            request,
            "main.html",
            {
                "profile_columns": state_container.settings.columns_for(columns),
                "drugs_to_display": drugs_to_display,
                "hide_ui": hide_ui == "1",
            },
        )

    @app.post("/", dependencies=[Depends(require_token)])
    def update_ledger(
        request: Request,
        do: str | None = Form(default=None),
        drug_index: str | None = Form(default=None, alias="drug-index"),
        amount: str | None = Form(default=None),
    ) -> RedirectResponse:
        """Apply a ledger command and redirect back to the listing."""
        state_container: AppContainer = request.app.state.container
        if do is None:
            raise _bad_request('missing value for "do"')
        index: int | None = None
        if drug_index is not None:
            digits = drug_index.removeprefix("-")
            if not (digits.isascii() and digits.isdigit()):
                raise _bad_request('invalid value for "drug-index"')
            index = int(drug_index)

        try:
            state_container.command_processor.execute(do, index, amount)
        except CommandValidationError as exc:
            raise _bad_request(exc.reason) from exc
        except LedgerError as exc:
            logger.exception("Failed to apply command", extra={"command": do})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=SERVER_ERROR_MESSAGE,
            ) from exc

        target = _redirect_target(state_container.settings.base_url, request)
        logger.debug("Redirecting after command", extra={"target": target})
        return RedirectResponse(target, status_code=status.HTTP_302_FOUND)

    return app


def _token_matches(token: str, valid_tokens: list[str]) -> bool:
    """Compare against every configured token without short-circuiting."""
    candidate = token.encode()
    matches = [hmac.compare_digest(candidate, valid.encode()) for valid in valid_tokens]
    return any(matches)


def _bad_request(reason: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail=f"400 Bad Request: {reason}"
    )


def _redirect_target(base_url: str, request: Request) -> str:
    """Join the request path and query onto the configured base URL."""
    path_and_query = request.url.path
    if request.url.query:
        path_and_query = f"{path_and_query}?{request.url.query}"
    return urljoin(base_url, path_and_query.lstrip("/"))
