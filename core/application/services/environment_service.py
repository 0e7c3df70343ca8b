"""Application service for storefront environment variables."""

import asyncio
from typing import List, Optional

from core.application.dtos.environment_dto import (
    CreateEnvironmentVarRequest,
    ExampleFileDTO,
    ServiceValidationDTO,
    UpdateEnvironmentVarRequest,
)
from core.domain.entities import EnvironmentVar
from core.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from core.domain.providers import PROVIDERS, detect_provider, get_provider
from core.domain.repositories import AuditStore
from core.infrastructure.adapters.environment.dotenv_file import DotenvFile
from core.infrastructure.logging import get_logger

APP_EXAMPLE_LINES = ("NODE_ENV=development", "PORT=5000")


def render_example() -> str:
    """Placeholder .env.example covering every provider."""
    blocks = []
    for provider in PROVIDERS:
        lines = [f"# {provider.title} Configuration"]
        lines += [f"{name}=your_{name.lower()}_here" for name in provider.required_vars]
        blocks.append("\n".join(lines))
    blocks.append("\n".join(["# Application Configuration", *APP_EXAMPLE_LINES]))
    return "\n\n".join(blocks) + "\n"


class EnvironmentService:
    """
    Application service for the storefront's environment variables.

    Responsibilities:
    - Keep the status store and the storefront .env file in step
    - Tell whether each provider has every variable it needs
    - Generate the storefront .env.example
    """

    def __init__(self, store: AuditStore, env_file: DotenvFile, example_file: DotenvFile) -> None:
        """Initialize environment service.

        Args:
            store: Status store holding the variables
            env_file: Storefront .env file
            example_file: Storefront .env.example file
        """
        self._store = store
        self._env_file = env_file
        self._example_file = example_file
        self._logger = get_logger("application.environment_service")

    async def list_vars(self, service: Optional[str] = None) -> List[EnvironmentVar]:
        return await self._store.list_env_vars(service)

    async def create_var(self, request: CreateEnvironmentVarRequest) -> EnvironmentVar:
        """Store a new variable and write it to the .env file.

        Raises:
            DuplicateRecordError: If the key is already managed
        """
        env_var = EnvironmentVar(
            key=request.key,
            value=request.value,
            service=request.service or detect_provider(request.key),
            is_active=request.is_active,
        )
        stored = await self._store.create_env_var(env_var)
        await asyncio.to_thread(self._env_file.set, stored.key, stored.value)
        self._logger.info(f"Environment variable added: {stored.key} (service={stored.service})")
        return stored

    async def update_var(self, var_id: str, request: UpdateEnvironmentVarRequest) -> EnvironmentVar:
        """Apply the fields set on ``request``; key and value changes reach the .env file.

        Raises:
            RecordNotFoundError: If the variable does not exist
            DuplicateRecordError: If the new key belongs to another variable
        """
        env_var = await self._store.get_env_var(var_id)
        if env_var is None:
            raise RecordNotFoundError("Environment variable", var_id)

        old_key = env_var.key
        changes = request.model_dump(exclude_unset=True)
        for name, value in changes.items():
            setattr(env_var, name, value)
        env_var.touch()

        stored = await self._store.update_env_var(env_var)
        if stored.key != old_key:
            await asyncio.to_thread(self._env_file.unset, old_key)
        if "key" in changes or "value" in changes:
            await asyncio.to_thread(self._env_file.set, stored.key, stored.value)
        self._logger.info(f"Environment variable updated: {stored.key}")
        return stored

    async def delete_var(self, var_id: str) -> None:
        """Forget a variable and remove it from the .env file.

        Raises:
            RecordNotFoundError: If the variable does not exist
        """
        env_var = await self._store.get_env_var(var_id)
        if env_var is None:
            raise RecordNotFoundError("Environment variable", var_id)
        await self._store.delete_env_var(var_id)
        await asyncio.to_thread(self._env_file.unset, env_var.key)
        self._logger.info(f"Environment variable deleted: {env_var.key}")

    async def validate_service(self, service: str) -> ServiceValidationDTO:
        """Report which required variables of ``service`` are not set.

        Raises:
            UnknownServiceError: If ``service`` is not a known provider
        """
        provider = get_provider(service)
        env_vars = await self._store.list_env_vars()
        missing = provider.missing_vars(v.key for v in env_vars if v.is_set)
        return ServiceValidationDTO(service=provider.name, valid=not missing, missing_vars=missing)

    async def import_env_file(self) -> List[EnvironmentVar]:
        """Bring variables from the .env file under management.

        Keys that are already managed keep their stored value.

        Returns:
            The newly stored variables
        """
        values = await asyncio.to_thread(self._env_file.read)
        imported = []
        for key, value in values.items():
            if await self._store.get_env_var_by_key(key) is not None:
                continue
            try:
                imported.append(
                    await self._store.create_env_var(
                        EnvironmentVar(key=key, value=value, service=detect_provider(key))
                    )
                )
            except DuplicateRecordError:
                self._logger.warning(f"Skipped {key}: added concurrently")
        self._logger.info(f"Imported {len(imported)} variable(s) from {self._env_file.path}")
        return imported

    async def create_example_file(self, overwrite: bool = False) -> ExampleFileDTO:
        """Write the placeholder .env.example unless one exists and ``overwrite`` is off."""
        path = str(self._example_file.path)
        if self._example_file.exists() and not overwrite:
            return ExampleFileDTO(success=True, created=False, path=path)
        await asyncio.to_thread(self._example_file.write, render_example())
        return ExampleFileDTO(success=True, created=True, path=path)
