"""Users service routes."""
from fastapi import APIRouter, Depends, HTTPException, Request

from ..core.database import Database, DatabaseError, get_db
from ..core.logging import get_logger
from ..core.security import generate_insecure_token, hash_password_md5
from ..models.schemas import LoginRequest, User

router = APIRouter(tags=["users"])
logger = get_logger("vulnshop.users")


@router.post("/users", status_code=201)
def create_user(user: User, db: Database = Depends(get_db)):
    """Create a user with an MD5 password hash."""
    hashed = hash_password_md5(user.password or "")
    try:
        db.create_user(user.username, user.email, hashed)
    except DatabaseError:
        raise HTTPException(status_code=500, detail="Failed to create user")

    logger.info(f"User created: {user.username}")
    return {"message": "User created successfully"}


@router.get("/users/id/{user_id}")
def get_user_by_id(user_id: str, db: Database = Depends(get_db)):
    """Fetch a user by numeric id (other services use this for snapshots)."""
    query = "SELECT id, username, email FROM users WHERE id = " + user_id
    try:
        results = db.execute_query(query)
    except DatabaseError:
        results = []
    if not results:
        raise HTTPException(status_code=404, detail="User not found")
    return results[0]


@router.get("/users/{username}")
def get_user(username: str, db: Database = Depends(get_db)):
    # VULNERABILITY: SQL injection through the path segment
    try:
        return db.get_user_by_username(username)
    except DatabaseError:
        raise HTTPException(status_code=404, detail="User not found")


@router.post("/login")
def login(credentials: LoginRequest, request: Request, db: Database = Depends(get_db)):
    """
    Check a password and hand out a token.

    VULNERABILITY: Unknown usernames resolve to a placeholder account whose
    password is "password123", and the token is derived from a hardcoded
    secret.
    """
    try:
        user = db.get_user_by_username(credentials.username)
    except DatabaseError:
        user = None
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if hash_password_md5(credentials.password) != str(user.get("password")):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = generate_insecure_token(credentials.username, request.app.state.settings.JWT_SECRET)
    return {"token": token, "user": user}


@router.get("/search")
def search_users(q: str = "", db: Database = Depends(get_db)):
    # VULNERABILITY: SQL injection in the LIKE pattern
    query = "SELECT * FROM users WHERE username LIKE '%" + q + "%'"
    try:
        return db.execute_query(query)
    except DatabaseError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/export")
def export_users(filename: str = "users.txt"):
    # VULNERABILITY: Command injection through the log file name
    logger.log_to_file(filename or "users.txt", "User export requested")
    return {"message": "Export completed"}
