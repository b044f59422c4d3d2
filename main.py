import json
from contextlib import asynccontextmanager
from typing import Annotated, Any, List

import structlog
from fastapi import BackgroundTasks, Depends, FastAPI, Path, Request, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.middleware.sessions import SessionMiddleware

import auth
import catalog
import chatbot
import contacts
import database
import news
import orders
import settings
from checkout import place_order
from errors import StorageFailure, StorefrontError, Unauthorized, ValidationError
from mailer import Mailer
from observability import configure_logging
from ratelimit import FixedWindowLimiter
from realtime import (
    CHAT_MESSAGE,
    CONTACT_RECEIVED,
    NEWS_UPDATE,
    ORDERS_UPDATE,
    PRODUCTS_UPDATE,
    hub,
    publish,
)
from schemas import (
    CheckoutRequest,
    ContactIn,
    ContactOut,
    LoginRequest,
    NewsIn,
    NewsOut,
    OrderOut,
    ProductIn,
    ProductOut,
    ProductUpdate,
    StatusUpdate,
)

configure_logging(log_level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
logger = structlog.get_logger(__name__)

mailer = Mailer.from_settings()
checkout_limiter = FixedWindowLimiter(
    settings.CHECKOUT_RATE_LIMIT,
    settings.RATE_LIMIT_WINDOW_SECONDS,
    message="Slow down, too many requests.",
)
login_limiter = FixedWindowLimiter(
    settings.LOGIN_RATE_LIMIT,
    settings.RATE_LIMIT_WINDOW_SECONDS,
    message="Too many login attempts, try again later.",
)

DocumentId = Annotated[int, Path(ge=0, le=database.MAX_DOCUMENT_ID)]


def seed_store() -> None:
    db = database.get_db()
    if db["product"].count_documents({}) == 0:
        try:
            entries = catalog.load_manifest(settings.PRODUCTS_MANIFEST)
        except StorefrontError as e:
            logger.warning("product_seed_skipped", reason=e.message)
        else:
            catalog.import_products(db, entries, settings.USD_TO_INR)
    news.seed_news(db, settings.NEWS_MANIFEST)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SEED_ON_STARTUP and database.db is not None:
        await run_in_threadpool(seed_store)
    yield


app = FastAPI(title="Farm Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
)


# ---------- Error handlers ----------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if isinstance(exc, StorageFailure):
        logger.error("storage_failure", path=request.url.path, error=exc.message, **exc.details)
        return _error(exc.status_code, "Internal server error")
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else ValidationError.default_message
    return _error(ValidationError.status_code, message)


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.error("storage_failure", path=request.url.path, error=str(exc), exc_info=exc)
    return _error(StorageFailure.status_code, "Internal server error")


# ---------- Basic Routes ----------

@app.get("/")
def read_root():
    return {"message": "Farm Storefront Backend Running"}


# ---------- Product Routes ----------

@app.get("/api/products", response_model=List[ProductOut])
def list_products(db=Depends(database.get_db)) -> Any:
    return catalog.list_products(db)


@app.get("/api/products/{product_id}", response_model=ProductOut)
def get_product(product_id: DocumentId, db=Depends(database.get_db)):
    return catalog.get_product(db, product_id)


async def broadcast_products(db) -> None:
    products = await run_in_threadpool(catalog.list_products, db)
    await publish(hub, PRODUCTS_UPDATE, products)


@app.post("/api/products", dependencies=[Depends(auth.require_admin)])
async def create_product(product: ProductIn, db=Depends(database.get_db)):
    created = await run_in_threadpool(catalog.create_product, db, product)
    await broadcast_products(db)
    return {"status": "ok", "item": created}


@app.put("/api/products/{product_id}", dependencies=[Depends(auth.require_admin)])
async def update_product(product_id: DocumentId, changes: ProductUpdate, db=Depends(database.get_db)):
    updated = await run_in_threadpool(catalog.update_product, db, product_id, changes)
    await broadcast_products(db)
    return {"status": "ok", "item": updated}


@app.delete("/api/products/{product_id}", dependencies=[Depends(auth.require_admin)])
async def delete_product(product_id: DocumentId, db=Depends(database.get_db)):
    await run_in_threadpool(catalog.delete_product, db, product_id)
    await broadcast_products(db)
    return {"status": "ok"}


@app.post("/api/admin/import-products", dependencies=[Depends(auth.require_admin)])
async def import_products(db=Depends(database.get_db)):
    entries = await run_in_threadpool(catalog.load_manifest, settings.PRODUCTS_MANIFEST)
    result = await run_in_threadpool(catalog.import_products, db, entries, settings.USD_TO_INR)
    await broadcast_products(db)
    return {"status": "ok", "added": result.added, "updated": result.updated}


# ---------- Checkout & Order Routes ----------

@app.post("/api/checkout", dependencies=[Depends(checkout_limiter)])
async def checkout(body: CheckoutRequest, background_tasks: BackgroundTasks, db=Depends(database.get_db)):
    order = await place_order(db, body, hub)
    background_tasks.add_task(mailer.notify_new_order, order)
    return {"status": "ok", "orderId": order["id"]}


@app.get("/api/orders", response_model=List[OrderOut], dependencies=[Depends(auth.require_admin)])
def list_orders(db=Depends(database.get_db)):
    return orders.list_orders(db)


@app.get("/api/orders/{order_id}", response_model=OrderOut, dependencies=[Depends(auth.require_admin)])
def get_order(order_id: DocumentId, db=Depends(database.get_db)):
    return orders.get_order(db, order_id)


@app.put("/api/orders/{order_id}/status", dependencies=[Depends(auth.require_admin)])
async def update_order_status(
    order_id: DocumentId,
    body: StatusUpdate,
    background_tasks: BackgroundTasks,
    db=Depends(database.get_db),
):
    order = await run_in_threadpool(orders.set_status, db, order_id, body.status)
    await publish(hub, ORDERS_UPDATE, order)
    background_tasks.add_task(mailer.notify_status_change, order)
    return {"status": "ok", "order": order}


# ---------- Contact & News Routes ----------

@app.post("/api/contact")
async def contact(message: ContactIn, db=Depends(database.get_db)):
    saved = await run_in_threadpool(contacts.create_contact, db, message)
    await publish(hub, CONTACT_RECEIVED, saved)
    return {"status": "ok"}


@app.get("/api/contacts", response_model=List[ContactOut], dependencies=[Depends(auth.require_admin)])
def list_contacts(db=Depends(database.get_db)):
    return contacts.list_contacts(db)


@app.get("/api/news", response_model=List[NewsOut])
def list_news(db=Depends(database.get_db)):
    return news.list_news(db)


@app.post("/api/news", dependencies=[Depends(auth.require_admin)])
async def add_news(item: NewsIn, db=Depends(database.get_db)):
    created = await run_in_threadpool(news.add_news, db, item)
    await publish(hub, NEWS_UPDATE, await run_in_threadpool(news.list_news, db))
    return {"status": "ok", "item": created}


# ---------- Admin Session ----------

@app.post("/api/admin/login", dependencies=[Depends(login_limiter)])
def admin_login(body: LoginRequest, request: Request):
    if not auth.verify_password(body.password):
        logger.warning("admin_login_failed", client=request.client.host if request.client else None)
        raise Unauthorized()
    request.session[auth.SESSION_KEY] = True
    logger.info("admin_login")
    return {"status": "ok"}


@app.post("/api/admin/logout")
def admin_logout(request: Request):
    request.session.clear()
    return {"status": "ok"}


@app.get("/api/admin/status")
def admin_status(request: Request):
    return {"isAdmin": auth.is_admin(request)}


# ---------- Real-time Channel ----------

@app.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    db = database.get_db()
    snapshot = {
        PRODUCTS_UPDATE: await run_in_threadpool(catalog.list_products, db),
        NEWS_UPDATE: await run_in_threadpool(news.list_news, db),
    }
    await hub.connect(websocket, snapshot)
    try:
        while True:
            try:
                message = json.loads(await websocket.receive_text())
            except ValueError:
                continue
            if isinstance(message, dict) and message.get("event") == CHAT_MESSAGE:
                await hub.send(websocket, CHAT_MESSAGE, chatbot.reply(str(message.get("data") or "")))
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)


# ---------- Diagnostics ----------

@app.get("/test")
def test_database():
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_url": "Set" if settings.DATABASE_URL else "Not Set",
        "database_name": "Set" if settings.DATABASE_NAME else "Not Set",
        "collections": [],
        "subscribers": len(hub.connections),
    }

    db = database.db
    if db is not None:
        try:
            response["collections"] = db.list_collection_names()[:10]
            response["database"] = "Connected & Working"
        except PyMongoError as e:
            response["database"] = f"Connected but Error: {str(e)[:50]}"

    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
