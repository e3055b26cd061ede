import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException

from company_api.auth.jwt import require_auth
from company_api.core.errors import InvalidInputError, NotFoundError, UniquenessViolation, ValidationError
from company_api.deps import get_company_service
from company_api.schemas.company import CompanyCreate, CompanyOut, CompanyPatchIn, StatusOut
from company_api.services.company import CompanyService

router = APIRouter(prefix="/companies", tags=["companies"])

logger = logging.getLogger(__name__)

SECURED = [Depends(require_auth)]


def new_company_id() -> str:
    return str(uuid.uuid4())


@router.get("/{company_id}", response_model=CompanyOut, response_model_exclude_none=True)
def get_company(company_id: str, service: CompanyService = Depends(get_company_service)):
    try:
        company = service.get_company(company_id)
    except NotFoundError:
        logger.info("company not found company_id=%s", company_id)
        raise HTTPException(status_code=404, detail="company not found")
    except Exception:
        logger.exception("failed to fetch company company_id=%s", company_id)
        raise HTTPException(status_code=500, detail="failed to fetch company")

    logger.info("company fetched company_id=%s", company_id)
    return company


@router.post(
    "",
    response_model=CompanyOut,
    response_model_exclude_none=True,
    status_code=201,
    dependencies=SECURED,
)
def create_company(payload: CompanyCreate, service: CompanyService = Depends(get_company_service)):
    try:
        company = service.create_company(payload.to_domain(new_company_id()))
    except ValidationError as e:
        logger.info("validation failed company_name=%s reason=%s", payload.name, e.reason)
        raise HTTPException(status_code=400, detail=e.reason)
    except UniquenessViolation as e:
        logger.warning("uniqueness violation company_name=%s", payload.name)
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidInputError as e:
        logger.warning("invalid input company_name=%s: %s", payload.name, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("failed to create company company_name=%s", payload.name)
        raise HTTPException(status_code=500, detail="failed to create company")

    logger.info("company created company_id=%s", company.id)
    return company


# contrato público: PATCH responde 201 no sucesso
@router.patch("/{company_id}", response_model=StatusOut, status_code=201, dependencies=SECURED)
def patch_company(
    company_id: str,
    payload: CompanyPatchIn,
    service: CompanyService = Depends(get_company_service),
):
    try:
        service.patch_company(company_id, payload.to_domain())
    except NotFoundError:
        logger.info("company not found for patch company_id=%s", company_id)
        raise HTTPException(status_code=404, detail="company not found")
    except ValidationError as e:
        logger.info("validation failed on patch company_id=%s reason=%s", company_id, e.reason)
        raise HTTPException(status_code=400, detail=e.reason)
    except UniquenessViolation as e:
        logger.warning("uniqueness violation on patch company_id=%s", company_id)
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidInputError as e:
        logger.warning("invalid input on patch company_id=%s: %s", company_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("failed to patch company company_id=%s", company_id)
        raise HTTPException(status_code=500, detail="failed to update company")

    logger.info("company patched company_id=%s", company_id)
    return StatusOut()


@router.delete("/{company_id}", response_model=StatusOut, dependencies=SECURED)
def delete_company(company_id: str, service: CompanyService = Depends(get_company_service)):
    try:
        service.delete_company(company_id)
    except NotFoundError:
        logger.info("company not found for delete company_id=%s", company_id)
        raise HTTPException(status_code=404, detail="company not found")
    except Exception:
        logger.exception("failed to delete company company_id=%s", company_id)
        raise HTTPException(status_code=500, detail="failed to delete the company")

    logger.info("company deleted company_id=%s", company_id)
    return StatusOut()
