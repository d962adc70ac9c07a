"""
Servicio de mutación de casos (alta, modificación parcial, baja) y lectura
individual.

- createdBy sale siempre de la identidad del llamador, nunca del cuerpo.
- id y createdBy son inmutables: en una actualización se descartan.
- updatedAt se refresca en cada modificación.
- La baja es inmediata e irreversible; borrar un id inexistente es
  CaseNotFoundException.
- Sin control de versión: dos escrituras sobre el mismo caso se aplican en
  el orden en que las serializa la base de datos (gana la última).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    CaseNotFoundException,
    DuplicateExpedientException,
    ValidationException,
)
from app.models.case_schemas import CyberCaseCreate, CyberCaseUpdate
from app.models.cyber_case import CyberCase
from app.services.base import BaseService

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def pydantic_errors_to_list(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Resume los errores de Pydantic en [{field, message, type}]."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        errors.append({
            "field": ".".join(loc) if loc else None,
            "message": err.get("msg"),
            "type": err.get("type"),
        })
    return errors


def parse_payload(schema: Type[SchemaT], data: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """
    Valida un payload contra el esquema.

    Raises:
        ValidationException: con la lista de campos erróneos
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = pydantic_errors_to_list(e)
        raise ValidationException(
            "Datos del caso inválidos",
            field=errors[0]["field"] if errors else None,
            errors=errors,
        ) from e


class CaseService(BaseService):
    """Operaciones sobre un único caso."""

    # =========================================================
    # LECTURA
    # =========================================================

    def get_case(self, case_id: str) -> CyberCase:
        """
        Obtiene un caso por id.

        Raises:
            CaseNotFoundException: si no existe
        """
        try:
            cyber_case = self.db.get(CyberCase, case_id)
        except Exception as e:
            raise self._handle_exception(e, "get_case", case_id=case_id) from e

        if cyber_case is None:
            raise CaseNotFoundException(case_id)
        return cyber_case

    # =========================================================
    # ALTA
    # =========================================================

    def create_case(
        self,
        data: Union[CyberCaseCreate, Mapping[str, Any]],
        caller_id: str,
    ) -> CyberCase:
        """
        Registra un caso nuevo.

        Args:
            data: Campos del caso (esquema o dict en camelCase/snake_case)
            caller_id: Usuario autenticado; queda como createdBy

        Returns:
            El caso persistido con id y timestamps asignados

        Raises:
            ValidationException: datos inválidos o expediente duplicado
            StoreException: fallo de la base de datos
        """
        if not caller_id:
            raise ValidationException("Se requiere la identidad del usuario", field="createdBy")

        payload = parse_payload(CyberCaseCreate, data)
        self._ensure_unique_expedient(payload.expedient_number)

        now = datetime.utcnow()
        cyber_case = CyberCase(
            **payload.model_dump(),
            created_by=caller_id,
            created_at=now,
            updated_at=now,
        )

        self._commit_case(cyber_case, "create_case", payload.expedient_number)

        self._log_info(
            "Caso creado",
            case_id=cyber_case.id,
            action="case_created",
            caller_id=caller_id,
            expedient_number=cyber_case.expedient_number,
        )
        return cyber_case

    # =========================================================
    # MODIFICACIÓN
    # =========================================================

    def update_case(
        self,
        case_id: str,
        data: Union[CyberCaseUpdate, Mapping[str, Any]],
        caller_id: Optional[str] = None,
    ) -> CyberCase:
        """
        Aplica una actualización parcial.

        Raises:
            ValidationException: datos inválidos o expediente duplicado
            CaseNotFoundException: si el caso no existe
            StoreException: fallo de la base de datos
        """
        payload = parse_payload(CyberCaseUpdate, data)
        changes = payload.changes()

        cyber_case = self.get_case(case_id)

        new_expedient = changes.get("expedient_number")
        if new_expedient is not None and new_expedient != cyber_case.expedient_number:
            self._ensure_unique_expedient(new_expedient, exclude_id=case_id)

        for attr, value in changes.items():
            setattr(cyber_case, attr, value)
        cyber_case.updated_at = datetime.utcnow()

        self._commit_case(cyber_case, "update_case", cyber_case.expedient_number)

        self._log_info(
            "Caso actualizado",
            case_id=case_id,
            action="case_updated",
            caller_id=caller_id,
            fields=sorted(changes),
        )
        return cyber_case

    # =========================================================
    # BAJA
    # =========================================================

    def delete_case(self, case_id: str, caller_id: Optional[str] = None) -> None:
        """
        Elimina un caso de forma definitiva.

        Raises:
            CaseNotFoundException: si el caso no existe
            StoreException: fallo de la base de datos
        """
        cyber_case = self.get_case(case_id)

        try:
            self.db.delete(cyber_case)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            raise self._handle_exception(e, "delete_case", case_id=case_id) from e

        self._log_info("Caso eliminado", case_id=case_id, action="case_deleted", caller_id=caller_id)

    # =========================================================
    # HELPERS
    # =========================================================

    def _ensure_unique_expedient(self, expedient_number: str, exclude_id: Optional[str] = None):
        query = select(CyberCase.id).where(CyberCase.expedient_number == expedient_number)
        if exclude_id is not None:
            query = query.where(CyberCase.id != exclude_id)

        try:
            existing = self.db.execute(query).first()
        except Exception as e:
            raise self._handle_exception(e, "check_expedient") from e

        if existing is not None:
            self._log_warning(
                "Número de expediente duplicado",
                action="duplicate_expedient",
                expedient_number=expedient_number,
            )
            raise DuplicateExpedientException(expedient_number)

    def _commit_case(self, cyber_case: CyberCase, context: str, expedient_number: str):
        """Persiste el caso; una violación de unicidad concurrente se reporta como duplicado."""
        case_id = cyber_case.id
        try:
            self.db.add(cyber_case)
            self.db.commit()
            self.db.refresh(cyber_case)
        except IntegrityError as e:
            self.db.rollback()
            if self._expedient_taken(expedient_number, case_id):
                raise DuplicateExpedientException(expedient_number) from e
            raise self._handle_exception(e, context, case_id=case_id) from e
        except Exception as e:
            self.db.rollback()
            raise self._handle_exception(e, context, case_id=case_id) from e

    def _expedient_taken(self, expedient_number: str, case_id: Optional[str]) -> bool:
        query = select(CyberCase.id).where(CyberCase.expedient_number == expedient_number)
        if case_id is not None:
            query = query.where(CyberCase.id != case_id)
        try:
            return self.db.execute(query).first() is not None
        except Exception as e:
            raise self._handle_exception(e, "check_expedient") from e
