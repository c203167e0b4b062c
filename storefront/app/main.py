#!/usr/bin/env python3
"""
Main FastAPI application for the bakery storefront.
"""

import os
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, File, Header, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from .config import BackendConfig, Config
from .generate import GenerationClient
from ..data.auth_client import AuthClient
from ..data.local_store import KeyValueStore, get_local_store
from ..schemas.io_models import (
    AdminLoginRequest,
    AdminOrdersResponse,
    AuthUser,
    ChatRequest,
    ChatResponse,
    ConceptRequest,
    CustomerOrdersResponse,
    ImageRequest,
    ImageResponse,
    PhoneLinkRequest,
    TrackResponse,
    UploadResponse,
)
from ..schemas.order_models import AIConcept, Order, OrderCreate, OrderNote, OrderStatus, OrderStatusUpdate
from ..schemas.product_models import Product, ProductInput, ProductUpdate
from ..services import status_workflow as workflow
from ..services.order_service import OrderService
from ..services.product_service import ProductService
from ..services.storage_service import MAX_IMAGE_BYTES, ImageStorage
from ..services.tracking import describe, link_phone, linked_phone, orders_for_phone, track_orders
from ..utils.errors import ImageValidationError, PersistenceError
from ..utils.logger import get_logger
from ..utils.security import verify_admin_password

logger = get_logger("api")

# Initialize FastAPI app
app = FastAPI(
    title="Samyra's Yummy Cakes API",
    description="Storefront backend: custom orders, tracking, catalog and AI cake concepts",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify your frontend domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependencies (overridable in tests)

def get_order_service() -> OrderService:
    return OrderService()

def get_product_service() -> ProductService:
    return ProductService()

def get_image_storage() -> ImageStorage:
    return ImageStorage()

def get_generation_client() -> GenerationClient:
    return GenerationClient()

def get_store() -> KeyValueStore:
    return get_local_store()

def get_auth_client() -> AuthClient:
    return AuthClient(BackendConfig.from_env())


def require_admin(x_admin_password: Optional[str] = Header(None)):
    if not verify_admin_password(x_admin_password or "", Config.ADMIN_PASSWORD):
        raise HTTPException(status_code=401, detail="Incorrect password")


def current_user(
    authorization: Optional[str] = Header(None),
    auth: AuthClient = Depends(get_auth_client),
) -> AuthUser:
    token = ""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    user = auth.get_user(token) if token else None
    if user is None:
        raise HTTPException(status_code=401, detail="Please sign in")
    return user


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Something went wrong. Please try again."})


@app.exception_handler(ImageValidationError)
async def image_validation_handler(request: Request, exc: ImageValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    backend = "remote" if BackendConfig.from_env().is_remote_configured() else "local"
    return {"status": "healthy", "backend": backend}


# Orders (customer facing)

@app.post("/api/orders", response_model=Order, status_code=201)
def create_order(payload: OrderCreate, service: OrderService = Depends(get_order_service)):
    """Custom order form / AI chef submission."""
    return service.create_order(payload)

@app.get("/api/orders", response_model=List[Order])
def orders_by_phone(phone: str = Query(..., min_length=1), service: OrderService = Depends(get_order_service)):
    return service.get_orders_by_phone(phone)

@app.get("/api/orders/{order_id}", response_model=Order)
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    order = service.get_order_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

@app.get("/api/track", response_model=TrackResponse)
def track(q: str = "", service: OrderService = Depends(get_order_service)):
    """Order ID (``ORD-...``) or phone number search for the tracking page."""
    return TrackResponse(query=q, orders=[describe(o) for o in track_orders(service, q)])

@app.get("/api/workflow")
async def workflow_tables():
    return workflow.workflow_descriptor()

@app.post("/api/uploads/reference-image", response_model=UploadResponse)
async def upload_reference_image(file: UploadFile = File(...), storage: ImageStorage = Depends(get_image_storage)):
    # Read one byte past the limit so oversized files are rejected without buffering them whole
    content = await file.read(MAX_IMAGE_BYTES + 1)
    url = await run_in_threadpool(storage.upload_image, file.filename, content, file.content_type, "orders")
    return UploadResponse(url=url)


# Catalog

@app.get("/api/products", response_model=List[Product])
def active_products(service: ProductService = Depends(get_product_service)):
    return service.get_active_products()


# AI chef and chat assistant

@app.post("/api/concept", response_model=AIConcept)
def cake_concept(request: ConceptRequest, client: GenerationClient = Depends(get_generation_client)):
    return client.generate_concept(request.prompt)

@app.post("/api/image", response_model=ImageResponse)
def cake_image(request: ImageRequest, client: GenerationClient = Depends(get_generation_client)):
    return ImageResponse(image=client.generate_image(request.prompt))

@app.post("/api/chat", response_model=ChatResponse)
def chat(request: ChatRequest, client: GenerationClient = Depends(get_generation_client)):
    return ChatResponse(text=client.chat(request.history, request.message))


# Signed-in customer

def _customer_view(user: AuthUser, store: KeyValueStore, service: OrderService) -> CustomerOrdersResponse:
    phone = linked_phone(user, store)
    orders = orders_for_phone(service, phone) if phone else []
    return CustomerOrdersResponse(display_name=user.display_name, linked_phone=phone, orders=orders)

@app.get("/api/me")
def me(user: AuthUser = Depends(current_user), store: KeyValueStore = Depends(get_store)):
    return {
        "id": user.id,
        "display_name": user.display_name,
        "email": user.email,
        "phone": user.phone,
        "linked_phone": linked_phone(user, store),
    }

@app.get("/api/me/orders", response_model=CustomerOrdersResponse)
def my_orders(
    user: AuthUser = Depends(current_user),
    store: KeyValueStore = Depends(get_store),
    service: OrderService = Depends(get_order_service),
):
    return _customer_view(user, store, service)

@app.post("/api/me/phone", response_model=CustomerOrdersResponse)
def link_my_phone(
    request: PhoneLinkRequest,
    user: AuthUser = Depends(current_user),
    store: KeyValueStore = Depends(get_store),
    service: OrderService = Depends(get_order_service),
):
    link_phone(user, request.phone, store)
    return _customer_view(user, store, service)

@app.post("/api/me/sign-out")
def sign_out(authorization: Optional[str] = Header(None), auth: AuthClient = Depends(get_auth_client)):
    token = authorization[7:].strip() if authorization and authorization.lower().startswith("bearer ") else ""
    return {"signed_out": auth.sign_out(token)}


# Admin dashboard

@app.post("/api/admin/login")
async def admin_login(request: AdminLoginRequest):
    if not verify_admin_password(request.password, Config.ADMIN_PASSWORD):
        raise HTTPException(status_code=401, detail="Incorrect password")
    return {"authenticated": True}

admin = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


def _note(payload: Optional[OrderNote]) -> Optional[str]:
    # An empty note box leaves the stored note alone
    return (payload.owner_notes or None) if payload else None


def _require(order: Optional[Order]) -> Order:
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@admin.get("/orders", response_model=AdminOrdersResponse)
def admin_orders(status: Optional[str] = None, service: OrderService = Depends(get_order_service)):
    orders = service.get_all_orders()
    return AdminOrdersResponse(
        orders=workflow.filter_by_status(orders, status),
        counts=workflow.status_counts(orders),
    )

@admin.patch("/orders/{order_id}/status", response_model=Order)
def admin_set_status(order_id: str, payload: OrderStatusUpdate, service: OrderService = Depends(get_order_service)):
    return _require(service.update_order_status(order_id, payload.status, payload.owner_notes or None))

@admin.post("/orders/{order_id}/advance", response_model=Order)
def admin_advance(order_id: str, payload: Optional[OrderNote] = None, service: OrderService = Depends(get_order_service)):
    order = _require(service.get_order_by_id(order_id))
    following = workflow.next_status(order.status)
    if following is None:
        raise HTTPException(status_code=409, detail=f"Order is {workflow.status_label(order.status)}; nothing to advance to")
    return _require(service.update_order_status(order_id, following, _note(payload)))

@admin.post("/orders/{order_id}/cancel", response_model=Order)
def admin_cancel(order_id: str, payload: Optional[OrderNote] = None, service: OrderService = Depends(get_order_service)):
    order = _require(service.get_order_by_id(order_id))
    if not workflow.can_cancel(order.status):
        raise HTTPException(status_code=409, detail=f"Order is {workflow.status_label(order.status)}; it can't be cancelled")
    return _require(service.update_order_status(order_id, OrderStatus.cancelled, _note(payload)))

@admin.delete("/orders/{order_id}")
def admin_delete_order(order_id: str, service: OrderService = Depends(get_order_service)):
    if not service.delete_order(order_id):
        raise HTTPException(status_code=404, detail="Order not found")
    return {"deleted": True}

@admin.get("/products", response_model=List[Product])
def admin_products(service: ProductService = Depends(get_product_service)):
    return service.get_all_products()

@admin.post("/products", response_model=Product, status_code=201)
def admin_create_product(payload: ProductInput, service: ProductService = Depends(get_product_service)):
    return service.create_product(payload)

@admin.patch("/products/{product_id}", response_model=Product)
def admin_update_product(product_id: str, payload: ProductUpdate, service: ProductService = Depends(get_product_service)):
    product = service.update_product(product_id, payload)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

@admin.delete("/products/{product_id}")
def admin_delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    if not service.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"deleted": True}

@admin.post("/products/images", response_model=UploadResponse)
async def admin_upload_product_image(file: UploadFile = File(...), service: ProductService = Depends(get_product_service)):
    content = await file.read(MAX_IMAGE_BYTES + 1)
    url = await run_in_threadpool(service.upload_image, file.filename, content, file.content_type)
    return UploadResponse(url=url)


app.include_router(admin)

# Serve the storefront UI build if present
static_files_path = os.path.join(os.path.dirname(__file__), "..", "..", "frontend", "public")
if os.path.exists(static_files_path):
    app.mount("/", StaticFiles(directory=static_files_path, html=True), name="static")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
