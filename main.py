import json
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import urlencode

import requests
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, PlainTextResponse
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from admin import AdminDraft, DraftRegistry, InvalidPathError, UnknownCollectionError
from database import RemoteStoreError, db
from defaults import CHAT_QA
from reviews import ReviewIntake, accept_review
from schemas import (
    CommitReport,
    FieldUpdate,
    LoginRequest,
    Message,
    MessageCreate,
    ReviewSubmission,
    ServiceItemUpdate,
    Token,
)
from storage import FileStorage, LocalContentStore, SessionFlags, SessionStorage
from sync import ContentSynchronizer

load_dotenv()

logger = logging.getLogger(__name__)

# =============
# Configuration
# =============
PORT = int(os.getenv("PORT", "3000"))
APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV == "production"
APP_URL = os.getenv("APP_URL", f"http://localhost:{PORT}").rstrip("/")
STATIC_DIR = os.getenv("STATIC_DIR", "dist")
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", os.path.join("data", "portfolio.json"))
SESSION_SECRET = os.getenv("SESSION_SECRET", "portfolio-secret")

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v1/userinfo"
GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/userinfo.email",
]
OAUTH_TIMEOUT = 15

# =====================
# Auth / Security Setup
# =====================
SECRET_KEY = os.getenv("JWT_SECRET", "super-secret-key-change")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 12

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
if not os.getenv("ADMIN_PASSWORD_HASH") and not os.getenv("ADMIN_PASSWORD"):
    logger.warning("ADMIN_PASSWORD_HASH / ADMIN_PASSWORD not set, using the default admin password")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH") or pwd_context.hash(os.getenv("ADMIN_PASSWORD", "admin123"))

# ==================
# Stores
# ==================
synchronizer = ContentSynchronizer(LocalContentStore(FileStorage(LOCAL_STORE_PATH)), db)
drafts = DraftRegistry()
USER_SESSION_KEY = "user"

# ==================
# FastAPI app config
# ==================
app = FastAPI(title="Portfolio API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    same_site="none" if IS_PRODUCTION else "lax",
    https_only=IS_PRODUCTION,
)

# =========
# Utilities
# =========

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def get_synchronizer() -> ContentSynchronizer:
    return synchronizer


def get_drafts() -> DraftRegistry:
    return drafts


def session_storage(request: Request) -> SessionStorage:
    return SessionStorage(request.session)


def get_current_admin(request: Request, authorization: Optional[str] = Header(None)):
    """Bearer token from /api/auth/login, or the admin flag of the signed session."""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
        try:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            raise HTTPException(status_code=401, detail="Invalid token")
        if payload.get("sub") != ADMIN_USERNAME or payload.get("role") != "admin":
            raise HTTPException(status_code=403, detail="Forbidden")
        return {"username": ADMIN_USERNAME, "role": "admin"}
    if SessionFlags.load(SessionStorage(request.session)).is_admin:
        return {"username": ADMIN_USERNAME, "role": "admin"}
    raise HTTPException(status_code=401, detail="Not authenticated")


def get_draft(
    admin: dict = Depends(get_current_admin),
    registry: DraftRegistry = Depends(get_drafts),
) -> AdminDraft:
    draft = registry.get(admin["username"])
    if draft is None:
        raise HTTPException(status_code=404, detail="No open draft")
    return draft


def google_redirect_uri() -> str:
    return f"{APP_URL}/auth/google/callback"


def build_google_auth_url() -> str:
    options = {
        "redirect_uri": google_redirect_uri(),
        "client_id": GOOGLE_CLIENT_ID,
        "access_type": "offline",
        "response_type": "code",
        "prompt": "consent",
        "scope": " ".join(GOOGLE_SCOPES),
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(options)}"


def fetch_google_profile(code: str) -> dict:
    """Code -> access token -> profile. Raises requests.RequestException on either step."""
    r = requests.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": GOOGLE_CLIENT_ID,
            "client_secret": GOOGLE_CLIENT_SECRET,
            "redirect_uri": google_redirect_uri(),
            "grant_type": "authorization_code",
        },
        timeout=OAUTH_TIMEOUT,
    )
    r.raise_for_status()
    access_token = r.json()["access_token"]
    r = requests.get(
        GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=OAUTH_TIMEOUT,
    )
    r.raise_for_status()
    return r.json()


def oauth_relay_page(profile: dict) -> str:
    payload = json.dumps({"type": "OAUTH_AUTH_SUCCESS", "user": profile}).replace("</", "<\\/")
    return f"""<html>
  <body>
    <script>
      if (window.opener) {{
        window.opener.postMessage({payload}, '*');
        window.close();
      }} else {{
        window.location.href = '/';
      }}
    </script>
    <p>Authentication successful. This window should close automatically.</p>
  </body>
</html>"""


def commit_report(result) -> CommitReport:
    return CommitReport(outcome=result.outcome.value, message=result.message)

# ======
# Routes
# ======
@app.get("/api/status")
def status(sync: ContentSynchronizer = Depends(get_synchronizer)):
    return {
        "backend": "running",
        "environment": APP_ENV,
        "remote": "configured" if sync.remote is not None else "not-configured",
    }

# Auth
@app.get("/api/auth/google/url")
def google_auth_url():
    return {"url": build_google_auth_url()}


@app.get("/auth/google/callback")
def google_callback(request: Request, code: Optional[str] = None):
    if not code:
        logger.error("Google OAuth callback without a code")
        return PlainTextResponse("Authentication failed", status_code=500)
    try:
        profile = fetch_google_profile(code)
    except (requests.RequestException, KeyError, ValueError) as e:
        body = getattr(getattr(e, "response", None), "text", None)
        logger.error("Google OAuth Error: %s", body or e)
        return PlainTextResponse("Authentication failed", status_code=500)
    request.session[USER_SESSION_KEY] = profile
    return HTMLResponse(oauth_relay_page(profile))


@app.get("/api/auth/me")
def me(request: Request):
    return {"user": request.session.get(USER_SESSION_KEY)}


@app.post("/api/auth/logout")
def logout(request: Request, registry: DraftRegistry = Depends(get_drafts)):
    if SessionFlags.load(session_storage(request)).is_admin:
        registry.discard(ADMIN_USERNAME)
    request.session.clear()
    return {"success": True}


@app.post("/api/auth/login", response_model=Token)
def login(data: LoginRequest, request: Request):
    if data.username != ADMIN_USERNAME or not verify_password(data.password, ADMIN_PASSWORD_HASH):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    storage = session_storage(request)
    flags = SessionFlags.load(storage)
    flags.is_admin = True
    flags.save(storage)
    token = create_access_token({"sub": ADMIN_USERNAME, "role": "admin"})
    return Token(access_token=token)

# Content
@app.get("/api/portfolio")
def get_portfolio(sync: ContentSynchronizer = Depends(get_synchronizer)):
    return sync.current().to_wire()


@app.get("/api/graphics")
def list_graphics(category: Optional[str] = None, sync: ContentSynchronizer = Depends(get_synchronizer)):
    graphics = sync.current().graphics
    if category and category != "All":
        graphics = [g for g in graphics if g.category == category]
    return [g.model_dump(by_alias=True) for g in graphics]


@app.get("/api/chat")
def chat_questions():
    return CHAT_QA

# Messages
@app.post("/api/messages", response_model=Message)
def send_message(message: MessageCreate, sync: ContentSynchronizer = Depends(get_synchronizer)):
    try:
        return sync.save_message(message)
    except RemoteStoreError:
        raise HTTPException(status_code=503, detail="Failed to send message. Please try again.")


@app.get("/api/messages", response_model=List[Message])
def list_messages(_: dict = Depends(get_current_admin), sync: ContentSynchronizer = Depends(get_synchronizer)):
    return sync.list_messages()

# Reviews
@app.get("/api/reviews/prompt")
def review_prompt(request: Request):
    """Called on back-navigation: should the review form re-open?"""
    storage = session_storage(request)
    flags = SessionFlags.load(storage)
    show = ReviewIntake(flags).on_back_navigation()
    flags.save(storage)
    return {"open": show, "has_submitted_review": flags.has_submitted_review}


@app.post("/api/reviews")
def submit_review(body: ReviewSubmission, request: Request, sync: ContentSynchronizer = Depends(get_synchronizer)):
    storage = session_storage(request)
    flags = SessionFlags.load(storage)
    intake = ReviewIntake(flags)
    intake.open()
    feedback = intake.select_rating(body.rating)
    review = intake.submit(body.name, body.comment)
    if review is None:
        raise HTTPException(status_code=400, detail=feedback.message)
    # only the reviews key locally; the remote row is replaced whole
    result = sync.commit(accept_review(sync.current(), review), fields=("reviews",))
    flags.save(storage)
    return {
        "review": review.model_dump(by_alias=True),
        "outcome": result.outcome.value,
        "message": "Thank you! Your review has been added to the showcase.",
    }

# Admin draft
@app.post("/api/admin/draft")
def open_draft(
    admin: dict = Depends(get_current_admin),
    sync: ContentSynchronizer = Depends(get_synchronizer),
    registry: DraftRegistry = Depends(get_drafts),
):
    draft = registry.open(admin["username"], sync.current())
    return {"content": draft.data}


@app.get("/api/admin/draft")
def get_draft_content(_: dict = Depends(get_current_admin), draft: AdminDraft = Depends(get_draft)):
    return {"content": draft.data}


@app.delete("/api/admin/draft")
def discard_draft(admin: dict = Depends(get_current_admin), registry: DraftRegistry = Depends(get_drafts)):
    registry.discard(admin["username"])
    return {"ok": True}


@app.patch("/api/admin/draft")
def update_draft_field(update: FieldUpdate, _: dict = Depends(get_current_admin), draft: AdminDraft = Depends(get_draft)):
    try:
        draft.set_field(update.path, update.value)
    except InvalidPathError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True}


@app.post("/api/admin/draft/save", response_model=CommitReport)
def save_draft(
    _: dict = Depends(get_current_admin),
    draft: AdminDraft = Depends(get_draft),
    sync: ContentSynchronizer = Depends(get_synchronizer),
):
    try:
        result = draft.commit(sync)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Draft is not a valid portfolio: {e.error_count()} error(s)")
    return commit_report(result)


@app.post("/api/admin/draft/services/{service}")
def add_service_item(service: str, _: dict = Depends(get_current_admin), draft: AdminDraft = Depends(get_draft)):
    try:
        return draft.add_service_item(service)
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail=f"No item list for service {service!r}")


@app.patch("/api/admin/draft/services/{service}/{index}")
def update_service_item(
    service: str,
    index: int,
    update: ServiceItemUpdate,
    _: dict = Depends(get_current_admin),
    draft: AdminDraft = Depends(get_draft),
):
    try:
        return draft.update_service_item(service, index, update.role, update.value)
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail=f"No item list for service {service!r}")
    except InvalidPathError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.delete("/api/admin/draft/services/{service}/{index}")
def remove_service_item(service: str, index: int, _: dict = Depends(get_current_admin), draft: AdminDraft = Depends(get_draft)):
    try:
        return {"removed": draft.remove_service_item(service, index)}
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail=f"No item list for service {service!r}")


@app.post("/api/admin/draft/{collection}")
def add_item(collection: str, _: dict = Depends(get_current_admin), draft: AdminDraft = Depends(get_draft)):
    try:
        return draft.add_item(collection)
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail=f"Unknown collection {collection!r}")


@app.delete("/api/admin/draft/{collection}/{item_id}")
def remove_item(collection: str, item_id: int, _: dict = Depends(get_current_admin), draft: AdminDraft = Depends(get_draft)):
    try:
        return {"removed": draft.remove_item(collection, item_id)}
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail=f"Unknown collection {collection!r}")

# ========
# Frontend
# ========

def mount_frontend(target: FastAPI, static_dir: str) -> None:
    """Serve the built single-page app; unknown paths fall back to index.html."""
    root = os.path.realpath(static_dir)
    index = os.path.join(root, "index.html")

    @target.get("/{full_path:path}", include_in_schema=False)
    def spa(full_path: str):
        if full_path.startswith("api/"):
            return JSONResponse({"detail": "Not Found"}, status_code=404)
        candidate = os.path.realpath(os.path.join(root, full_path))
        if full_path and candidate.startswith(root + os.sep) and os.path.isfile(candidate):
            return FileResponse(candidate)
        if not os.path.isfile(index):
            return JSONResponse({"detail": "Frontend not built"}, status_code=404)
        return FileResponse(index)


# development: the front-end dev server runs separately and proxies /api and /auth here
if IS_PRODUCTION:
    mount_frontend(app, STATIC_DIR)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Server running on http://localhost:%s", PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
