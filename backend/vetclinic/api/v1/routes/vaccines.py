"""Module: vaccines."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vetclinic.api.v1.routes.deps import get_current_user, get_db
from vetclinic.services import vaccines as vaccine_service

router = APIRouter()


# Endpoint: vaccine catalogue used to populate the vaccination form.
@router.get("", summary="List vaccines", dependencies=[Depends(get_current_user)])
def list_vaccines(db: Session = Depends(get_db)):
    return vaccine_service.list_vaccines(db)
