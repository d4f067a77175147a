from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from portal_hub.core.errors import AuthenticationRequiredError
from portal_hub.core.security import get_current_account, get_gateway, oauth2_scheme
from portal_hub.gateway.base import Account, Gateway
from portal_hub.schemas.user import AccountInfo, PasswordChange, Token
from portal_hub.services.account import AccountWorkflow

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_account_workflow(gateway: Gateway = Depends(get_gateway)) -> AccountWorkflow:
    return AccountWorkflow(gateway)


@router.post("/token", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    workflow: AccountWorkflow = Depends(get_account_workflow),
):
    session = await workflow.sign_in(form_data.username, form_data.password)
    return {"access_token": session.access_token, "token_type": "bearer"}


@router.post("/logout")
async def logout(
    token: str | None = Depends(oauth2_scheme),
    workflow: AccountWorkflow = Depends(get_account_workflow),
):
    if not token:
        raise AuthenticationRequiredError()
    await workflow.sign_out(token)
    return {"message": "Signed out"}


@router.get("/me", response_model=AccountInfo)
async def read_me(current_account: Account = Depends(get_current_account)):
    return current_account


@router.post("/change-password")
async def change_password(
    password_data: PasswordChange,
    current_account: Account = Depends(get_current_account),
    workflow: AccountWorkflow = Depends(get_account_workflow),
):
    await workflow.change_password(
        current_account,
        password_data.current_password,
        password_data.new_password,
        password_data.confirm_password,
    )
    return {"message": "Password updated successfully."}
