from fastapi import APIRouter, Depends

from clubsphere.auth.dependencies import get_storage, require_admin
from clubsphere.storage.base import Storage
from clubsphere.storage.records import User
from clubsphere.storage.views import AdminStats

router = APIRouter(tags=['admin'])


@router.get('/stats', response_model=AdminStats)
def get_stats(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_admin),
):
    del current_user
    return storage.get_stats()
