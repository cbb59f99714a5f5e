"""Orders service routes."""
import json
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from ..core.database import Database, DatabaseError, get_db
from ..core.logging import get_logger
from ..models.schemas import Order, OrderStatusUpdate
from ..services.order_xml import orders_to_xml, parse_order

router = APIRouter(tags=["orders"])
logger = get_logger("vulnshop.orders")


@router.post("/orders", status_code=201)
def create_order(order: Order, request: Request, db: Database = Depends(get_db)):
    """
    Create a pending order with snapshots of its user and product.

    Snapshots come from the users and products services; if either is
    unreachable the snapshot is stored as an empty object.
    """
    order.created_at = datetime.now(timezone.utc).replace(microsecond=0)
    order.status = "pending"

    snapshots = request.app.state.snapshots
    user_snapshot = json.dumps(snapshots.fetch_user(order.user_id))
    product_snapshot = json.dumps(snapshots.fetch_product(order.product_id))

    # VULNERABILITY: SQL injection - snapshot JSON is pasted into the statement
    query = (
        "INSERT INTO orders (user_id, product_id, quantity, total_price, status, created_at, "
        "user_snapshot, product_snapshot) VALUES "
        f"({order.user_id}, {order.product_id}, {order.quantity}, {order.total_price:f}, "
        f"'{order.status}', '{order.created_at.isoformat()}', '{user_snapshot}', '{product_snapshot}')"
    )
    try:
        db.execute_query(query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to create order")

    logger.info(f"Order created for user {order.user_id}")
    return {"message": "Order created successfully", "order": order}


@router.post("/orders/import", status_code=201)
async def import_orders(request: Request):
    # VULNERABILITY: XXE - external entities are resolved while parsing
    body = await request.body()
    try:
        xml_order = parse_order(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid XML: " + str(e))

    query = (
        "INSERT INTO orders (user_id, product_id, quantity, total_price, status) VALUES "
        f"({xml_order.user_id}, {xml_order.product_id}, {xml_order.quantity}, "
        f"{xml_order.total_price:f}, 'pending')"
    )
    db: Database = request.app.state.db
    try:
        await run_in_threadpool(db.execute_query, query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to import order")

    return {"message": "Order imported successfully"}


@router.get("/orders/export")
def export_orders(format: str = "", user_id: str = "", db: Database = Depends(get_db)):
    """Dump orders, including snapshots, as JSON or XML."""
    query = "SELECT * FROM orders"
    if user_id:
        # VULNERABILITY: SQL injection
        query += " WHERE user_id = " + user_id

    try:
        results = db.execute_query(query)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if format == "xml":
        return Response(content=orders_to_xml(results), media_type="application/xml")
    return results


@router.get("/orders/{order_id}")
def get_order(order_id: str, db: Database = Depends(get_db)):
    query = "SELECT * FROM orders WHERE id = " + order_id
    try:
        results = db.execute_query(query)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not results:
        raise HTTPException(status_code=404, detail="Order not found")
    return results[0]


@router.get("/orders")
def list_orders(
    user_id: str = "",
    status: str = "",
    sort_by: str = "",
    db: Database = Depends(get_db),
):
    query = "SELECT * FROM orders WHERE 1=1"
    if user_id:
        query += " AND user_id = " + user_id
    if status:
        query += " AND status = '" + status + "'"
    if sort_by:
        # VULNERABILITY: ORDER BY injection
        query += " ORDER BY " + sort_by

    try:
        return db.execute_query(query)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/orders/{order_id}/status")
def update_order_status(order_id: str, update: OrderStatusUpdate, db: Database = Depends(get_db)):
    query = "UPDATE orders SET status = '" + update.status + "' WHERE id = " + order_id
    try:
        db.execute_query(query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to update order")
    return {"message": "Order status updated"}


@router.delete("/orders/{order_id}")
def delete_order(order_id: str, db: Database = Depends(get_db)):
    query = "DELETE FROM orders WHERE id = " + order_id
    try:
        db.execute_query(query)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to delete order")
    return {"message": "Order deleted successfully"}
