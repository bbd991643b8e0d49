"""Org chart configuration and environment setup."""

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from orgchart.utils.types import DanglingPolicy

type ConfigDict = dict[str, str | int | bool | list[str]]


@dataclass(frozen=True)
class DirectoryConfig:
    employees: Path
    departments: Path | None
    only_active: bool


@dataclass(frozen=True)
class RenderConfig:
    title: str
    show_departments: bool


@dataclass(frozen=True)
class OrgChartConfig:
    directory: DirectoryConfig
    render: RenderConfig
    dangling: DanglingPolicy


def load_orgchart_config(env: str = "production") -> OrgChartConfig:
    match env:
        case "production":
            directory = DirectoryConfig(
                employees=Path("data/raw/hr/hris_exports"),
                departments=Path("data/raw/hr/departments.csv"),
                only_active=True,
            )
        case "staging":
            directory = DirectoryConfig(
                employees=Path("data/staging/hr/hris_exports"),
                departments=Path("data/staging/hr/departments.csv"),
                only_active=True,
            )
        case "development":
            directory = DirectoryConfig(
                employees=Path("data/dev/employees.json"),
                departments=None,
                only_active=False,
            )
        case other:
            raise ValueError(f"Unknown environment: {other}")

    config = OrgChartConfig(
        directory=directory,
        render=RenderConfig(title="Organization Chart", show_departments=True),
        dangling=DanglingPolicy.PROMOTE,
    )
    return apply_overrides(config, get_env_config())


def apply_overrides(config: OrgChartConfig, overrides: ConfigDict) -> OrgChartConfig:
    """Layer ``[tool.orgchart]`` settings over an environment's defaults."""
    for key, value in overrides.items():
        match key:
            case "employees":
                config = replace(config, directory=replace(config.directory, employees=Path(value)))
            case "departments":
                config = replace(config, directory=replace(config.directory, departments=Path(value)))
            case "only_active":
                config = replace(config, directory=replace(config.directory, only_active=bool(value)))
            case "title":
                config = replace(config, render=replace(config.render, title=str(value)))
            case "show_departments":
                config = replace(config, render=replace(config.render, show_departments=bool(value)))
            case "dangling":
                config = replace(config, dangling=DanglingPolicy(value))
            case unknown:
                raise ValueError(f"Unknown [tool.orgchart] setting: {unknown}")
    return config


def get_env_config(pyproject: Path | None = None) -> ConfigDict:
    """Read org chart settings from pyproject.toml, if there is one."""
    pyproject = pyproject or Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("orgchart", {})
