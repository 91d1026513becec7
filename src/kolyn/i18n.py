"""Localized user-facing messages.

A ``Locale`` is built once from the loaded ``GlobalConfig`` and handed to the
command handlers that print translated text.
"""

from __future__ import annotations

from dataclasses import dataclass

from kolyn.config import DEFAULT_LANGUAGE, GlobalConfig

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "no_config": "No skills sources configured. Run 'kolyn config init' or create .kolyn.json.",
        "global_created": "Global configuration created at {path}",
        "using_global": "Using global skills configuration.",
        "using_local": "Using local project configuration (.kolyn.json).",
        "installing_skills": "Installing skills from: {target}",
        "updating_skills": "Updating skills at: {target}",
        "sync_success": "Synchronization completed successfully.",
        "sync_failed": "Failed to sync {url}: {error}",
        "repo_access_error": (
            "Repository access error. If private, check your SSH keys or credentials."
        ),
        "check_start": "Kolyn Check - Project Audit",
        "no_agent_md": "Agent.md not found in this project. Run 'kolyn init' first.",
        "no_package_json": "package.json not found. Dependency checks skipped.",
        "no_skills": "No skills declared in Agent.md to audit.",
        "project_type": "Project type: {value}",
        "active_skills": "Active skills: {count}",
        "skill_not_found": "Skill not found: {path} (try 'kolyn sync' or 'kolyn init')",
        "evaluating_skill": "Evaluating skill: {category}/{name}",
        "missing_dep": "Missing dependency: {target}",
        "found_dep": "Dependency found: {target}",
        "missing_dep_any": "At least one of these dependencies is required: {target}",
        "found_dep_any": "Dependency found (any): {target}",
        "forbidden_dep": "Forbidden dependency detected: {target}",
        "absent_forbidden_dep": "Forbidden dependency absent: {target}",
        "missing_file": "Missing file: {target}",
        "found_file": "File found: {target}",
        "missing_file_any": "At least one of these files is required: {target}",
        "found_file_any": "File found (any): {target}",
        "missing_env": "Missing environment variable: {target}",
        "found_env": "Environment variable found: {target}",
        "tip": "Tip: {message}",
        "audit_summary": "Summary: {total} checks, {passed} passed, {warnings} warnings",
        "audit_issues": "{warnings} issues found during audit",
    },
    "es": {
        "no_config": (
            "No hay fuentes de skills configuradas. Ejecuta 'kolyn config init' "
            "o crea .kolyn.json."
        ),
        "global_created": "Configuración global creada en {path}",
        "using_global": "Usando configuración global de skills.",
        "using_local": "Usando configuración local del proyecto (.kolyn.json).",
        "installing_skills": "Instalando skills desde: {target}",
        "updating_skills": "Actualizando skills en: {target}",
        "sync_success": "Sincronización completada exitosamente.",
        "sync_failed": "Fallo al sincronizar {url}: {error}",
        "repo_access_error": (
            "Error de acceso al repositorio. Si es privado, verifica tus llaves SSH "
            "o credenciales."
        ),
        "check_start": "Kolyn Check - Auditoría de Proyecto",
        "no_agent_md": "No se encontró Agent.md en este proyecto. Ejecuta 'kolyn init'.",
        "no_package_json": "No se encontró package.json. Se omitirán chequeos de dependencias.",
        "no_skills": "No hay skills definidos en Agent.md para auditar.",
        "project_type": "Tipo: {value}",
        "active_skills": "Skills activos: {count}",
        "skill_not_found": "Skill no encontrado: {path} (prueba 'kolyn sync' o 'kolyn init')",
        "evaluating_skill": "Evaluando skill: {category}/{name}",
        "missing_dep": "Falta dependencia: {target}",
        "found_dep": "Dependencia encontrada: {target}",
        "missing_dep_any": "Se requiere al menos una de estas dependencias: {target}",
        "found_dep_any": "Dependencia encontrada (any): {target}",
        "forbidden_dep": "Dependencia prohibida detectada: {target}",
        "absent_forbidden_dep": "Dependencia prohibida ausente: {target}",
        "missing_file": "Falta archivo: {target}",
        "found_file": "Archivo encontrado: {target}",
        "missing_file_any": "Se requiere al menos uno de estos archivos: {target}",
        "found_file_any": "Archivo encontrado (any): {target}",
        "missing_env": "Falta variable de entorno: {target}",
        "found_env": "Variable de entorno encontrada: {target}",
        "tip": "Tip: {message}",
        "audit_summary": "Resumen: {total} verificaciones, {passed} pasadas, {warnings} alertas",
        "audit_issues": "se encontraron {warnings} problemas en la auditoría",
    },
}


@dataclass(frozen=True)
class Locale:
    language: str = DEFAULT_LANGUAGE

    @classmethod
    def from_config(cls, config: GlobalConfig) -> Locale:
        language = config.language if config.language in _MESSAGES else DEFAULT_LANGUAGE
        return cls(language=language)

    def text(self, key: str, **kwargs: object) -> str:
        """Look up a message; unknown keys are returned as-is."""
        template = _MESSAGES[self.language].get(key)
        if template is None:
            template = _MESSAGES[DEFAULT_LANGUAGE].get(key, key)
        return template.format(**kwargs) if kwargs else template
