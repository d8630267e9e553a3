"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Iterable, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from activations.domain.activation import ActivationEntry
from activations.infrastructure.models import ActivationEntry as ActivationEntryModel
from core.domain.exceptions import DuplicateLicenseError, LicenseNotFoundError
from core.domain.value_objects import Email, Platform
from licenses.domain.license import LicenseRecord
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.models import hash_license_key
from licenses.ports.license_repository import LicenseMutation, LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Serializes per-license mutations with SELECT ... FOR UPDATE
    """

    def _to_domain(
        self, model: LicenseModel, history: Iterable[ActivationEntryModel]
    ) -> LicenseRecord:
        """
        Convert Django models to a domain entity.

        Args:
            model: Django License model
            history: Activation history rows of the license

        Returns:
            LicenseRecord domain entity
        """
        return LicenseRecord(
            id=model.id,
            license_key=model.license_key,
            email=Email(model.email),
            platform=Platform(model.platform),
            sale_id=model.sale_id,
            max_activations=model.max_activations,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
            expires_at=model.expires_at,
            name=model.name,
            product_id=model.product_id,
            notes=model.notes,
            metadata=dict(model.metadata or {}),
            token_payload=dict(model.token_payload or {}),
            bound_machine_ids=tuple(model.machine_ids or ()),
            activations=tuple(
                ActivationEntry(
                    id=row.id,
                    machine_id=row.machine_id,
                    timestamp=row.activated_at,
                    ip=row.ip,
                    os=row.os,
                    app=row.app,
                )
                for row in history
            ),
        )

    def _load(self, model: LicenseModel) -> LicenseRecord:
        history = ActivationEntryModel.objects.filter(license_id=model.id).order_by(
            "activated_at"
        )
        return self._to_domain(model, list(history))

    def _apply(self, model: LicenseModel, record: LicenseRecord) -> None:
        """Copy mutable entity fields onto the model."""
        model.license_key = record.license_key
        model.token_payload = record.token_payload
        model.email = str(record.email)
        model.name = record.name
        model.product_id = record.product_id
        model.notes = record.notes
        model.metadata = record.metadata
        model.platform = record.platform.value
        model.sale_id = record.sale_id
        model.max_activations = record.max_activations
        model.machine_ids = list(record.bound_machine_ids)
        model.is_active = record.is_active
        model.updated_at = record.updated_at
        model.expires_at = record.expires_at

    def _append_history(self, record: LicenseRecord, known_ids: Iterable[uuid.UUID]) -> None:
        """Insert history entries that are not yet persisted."""
        known = set(known_ids)
        new_rows = [
            ActivationEntryModel(
                id=entry.id,
                license_id=record.id,
                machine_id=entry.machine_id,
                ip=entry.ip,
                os=entry.os,
                app=entry.app,
                activated_at=entry.timestamp,
            )
            for entry in record.activations
            if entry.id not in known
        ]
        if new_rows:
            ActivationEntryModel.objects.bulk_create(new_rows)

    @sync_to_async
    def create(self, record: LicenseRecord) -> LicenseRecord:
        """
        Atomically insert a new license record.

        Args:
            record: LicenseRecord entity to insert

        Returns:
            Saved license record

        Raises:
            DuplicateLicenseError: If the key or sale already exists
        """
        model = LicenseModel(id=record.id, created_at=record.created_at)
        self._apply(model, record)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
                self._append_history(record, ())
        except IntegrityError as e:
            raise DuplicateLicenseError(
                f"License already exists for {record.platform.value}:{record.sale_id}"
            ) from e
        return self._load(model)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[LicenseRecord]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            LicenseRecord or None if not found
        """
        try:
            model = LicenseModel.objects.get(id=license_id)
            return self._load(model)
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[LicenseRecord]:
        """
        Find a license by its key string.

        Args:
            license_key: Encoded license token

        Returns:
            LicenseRecord or None if not found
        """
        model = LicenseModel.objects.filter(key_hash=hash_license_key(license_key)).first()
        if model is None:
            return None
        return self._load(model)

    @sync_to_async
    def find_by_sale(self, platform: Platform, sale_id: str) -> Optional[LicenseRecord]:
        """
        Find a license by its external sale.

        Args:
            platform: Sales channel
            sale_id: External sale identifier

        Returns:
            LicenseRecord or None if not found
        """
        model = LicenseModel.objects.filter(platform=platform.value, sale_id=sale_id).first()
        if model is None:
            return None
        return self._load(model)

    @sync_to_async
    def list_all(self, email: Optional[str] = None) -> List[LicenseRecord]:
        """
        List all licenses, newest first.

        Args:
            email: Only licenses for this buyer (case-insensitive)

        Returns:
            List of LicenseRecord entities
        """
        queryset = LicenseModel.objects.order_by("-created_at")
        if email:
            queryset = queryset.filter(email__iexact=email)
        models = list(queryset.prefetch_related("activation_history"))
        return [
            self._to_domain(
                model, sorted(model.activation_history.all(), key=lambda row: row.activated_at)
            )
            for model in models
        ]

    @sync_to_async
    def set_active(self, license_id: uuid.UUID, is_active: bool) -> LicenseRecord:
        """
        Atomically set the ``is_active`` flag.

        Args:
            license_id: License UUID
            is_active: New flag value

        Returns:
            Updated license record

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        with transaction.atomic():
            try:
                model = LicenseModel.objects.select_for_update().get(id=license_id)
            except LicenseModel.DoesNotExist as e:
                raise LicenseNotFoundError(f"License {license_id} not found") from e
            record = self._load(model)
            updated = record.mark_active() if is_active else record.mark_inactive()
            model.is_active = updated.is_active
            model.updated_at = updated.updated_at
            model.save(update_fields=["is_active", "updated_at"])
            return updated

    @sync_to_async
    def mutate(
        self, license_key: str, mutation: LicenseMutation
    ) -> Tuple[LicenseRecord, LicenseRecord]:
        """
        Apply ``mutation`` to a record under a row lock.

        Args:
            license_key: Encoded license token
            mutation: Function returning the new record

        Returns:
            Tuple of (record before, record after)

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        with transaction.atomic():
            try:
                model = LicenseModel.objects.select_for_update().get(
                    key_hash=hash_license_key(license_key)
                )
            except LicenseModel.DoesNotExist as e:
                raise LicenseNotFoundError() from e

            before = self._load(model)
            after = mutation(before)
            if after is before:
                return before, after

            self._apply(model, after)
            model.save()
            self._append_history(after, (entry.id for entry in before.activations))
            return before, after
