"""Products service routes."""
import os
import subprocess
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse

from ..core.database import Database, DatabaseError, get_db
from ..core.logging import get_logger
from ..models.schemas import Product

router = APIRouter(tags=["products"])
logger = get_logger("vulnshop.products")


@router.post("/products", status_code=201)
def create_product(product: Product, db: Database = Depends(get_db)):
    # VULNERABILITY: SQL injection through string formatting
    query = (
        "INSERT INTO products (name, description, price, category) "
        f"VALUES ('{product.name}', '{product.description}', {product.price:f}, '{product.category}')"
    )
    try:
        db.execute_query(query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to create product")

    logger.info(f"Product created: {product.name}")
    return {"message": "Product created successfully", "product": product}


@router.get("/products/{product_id}")
def get_product(product_id: str, db: Database = Depends(get_db)):
    query = "SELECT * FROM products WHERE id = " + product_id
    try:
        results = db.execute_query(query)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not results:
        raise HTTPException(status_code=404, detail="Product not found")
    return results[0]


@router.put("/products/{product_id}")
def update_product(product_id: str, product: Product, db: Database = Depends(get_db)):
    query = (
        f"UPDATE products SET name='{product.name}', description='{product.description}', "
        f"price={product.price:f}, category='{product.category}' WHERE id={product_id}"
    )
    try:
        db.execute_query(query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to update product")
    return {"message": "Product updated successfully"}


@router.delete("/products/{product_id}")
def delete_product(product_id: str, db: Database = Depends(get_db)):
    query = "DELETE FROM products WHERE id = " + product_id
    try:
        db.execute_query(query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to delete product")
    return {"message": "Product deleted successfully"}


@router.get("/products")
def list_products(
    category: str = "",
    min_price: str = "",
    max_price: str = "",
    db: Database = Depends(get_db),
):
    """List products; every filter is concatenated into the WHERE clause."""
    query = "SELECT * FROM products WHERE 1=1"
    if category:
        query += " AND category = '" + category + "'"
    if min_price:
        query += " AND price >= " + min_price
    if max_price:
        query += " AND price <= " + max_price

    try:
        return db.execute_query(query)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/images/{filename:path}", response_class=PlainTextResponse)
def get_image(filename: str, request: Request):
    # VULNERABILITY: Path traversal - no validation of the joined path
    image_path = os.path.join(request.app.state.settings.IMAGES_DIR, filename)
    try:
        return logger.read_log_file(image_path)
    except (OSError, UnicodeDecodeError):
        raise HTTPException(status_code=404, detail="Image not found")


@router.post("/images")
async def upload_image(request: Request, file: Optional[UploadFile] = File(None)):
    """
    Store an uploaded file.

    VULNERABILITY: Unrestricted upload - no type check, no size limit, and
    the client-supplied file name is used as the path.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    upload_dir = request.app.state.settings.UPLOAD_DIR
    upload_path = os.path.join(upload_dir, file.filename)
    try:
        os.makedirs(os.path.dirname(upload_path), exist_ok=True)
        with open(upload_path, "wb") as f:
            f.write(await file.read())
    except OSError:
        raise HTTPException(status_code=500, detail="Failed to save file")

    return {"message": "File uploaded successfully", "filename": file.filename}


@router.get("/execute")
def execute_command(cmd: str = ""):
    # VULNERABILITY: Command injection - arbitrary shell execution
    if not cmd:
        raise HTTPException(status_code=400, detail="No command provided")

    result = subprocess.run(cmd, shell=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
    output = result.stdout.decode("utf-8", errors="replace")
    if result.returncode != 0:
        return JSONResponse(
            status_code=500,
            content={"error": f"exit status {result.returncode}", "output": output},
        )
    return {"output": output}
