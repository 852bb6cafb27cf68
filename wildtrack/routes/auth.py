# wildtrack/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from wildtrack import auth, credentials, database, models, schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"]
)

INVALID_CREDENTIALS = "Invalid credentials"


# Admin Login (same message whichever check failed)
@router.post("/login")
def login(payload: schemas.LoginRequest, db: Session = Depends(database.get_db)):
    user = credentials.authenticate_admin(db, payload.username, payload.password)
    if user is None:
        logger.info("Failed login attempt for username %r", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth.create_access_token(user["id"], user["role"], user["username"])
    logger.info("Admin %s logged in", user["username"])
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": user,
    }


@router.get("/verify")
def verify(current_user: dict = Depends(auth.get_current_user)):
    return {"success": True, "user": current_user}


# Tokens are stateless: logging out means the client discards its copy
@router.post("/logout")
def logout(current_user: dict = Depends(auth.get_current_user)):
    logger.info("Admin %s logged out", current_user.get("username"))
    return {"success": True, "message": "Logged out successfully"}


@router.post("/create-admin", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth.verify_admin_user)])
def create_admin(payload: schemas.AdminCreate, db: Session = Depends(database.get_db)):
    existing_admin = db.query(models.Admin).filter(models.Admin.username == payload.username).first()
    if existing_admin:
        raise HTTPException(status_code=400, detail="Admin with this username already exists")

    new_admin = models.Admin(
        username=payload.username,
        password=auth.get_password_hash(payload.password),
        name=payload.name,
        email=payload.email,
        role=payload.role,
        is_active=True,
    )
    try:
        db.add(new_admin)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Admin with this username already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Create admin failed")
        raise HTTPException(status_code=500, detail="Server error creating admin")
    db.refresh(new_admin)

    logger.info("Admin %s created with role %s", new_admin.username, new_admin.role)
    return {
        "success": True,
        "message": f"Admin {new_admin.username} created successfully",
        "admin": credentials.public_admin(new_admin),
    }
