import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

from transmute.model import DeploymentEnvironment

# passed to Settings() directly; never read from files or overrides
BootKeys: t.Final = frozenset({"root", "env", "override"})


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: t.Required[tuple[str, ...]]


class SettingsSource(PydanticBaseSettingsSource):
    """Collect one value per settings field; fields the source lacks raise KeyError."""

    @property
    def state(self) -> CurrentState:
        return t.cast(CurrentState, self.current_state)

    def __call__(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in BootKeys:
                continue
            try:
                value, key, is_complex = self.get_field_value(field, field_name)
                data[key] = self.prepare_field_value(field_name, field, value, is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e
        return data


class OverrideSettingsSource(SettingsSource):
    """Values from ``-o dotted.path=value`` options, each value parsed as YAML.

    Only the overridden keys are returned; pydantic-settings merges them over
    the sources that follow this one.
    """

    @functools.cached_property
    def options(self) -> dict[str, t.Any]:
        tree: dict[str, t.Any] = {}
        for option in self.state["override"]:
            if "=" not in option:
                raise SettingsError(f"override {option!r} is not of the form key=value")
            dotted, raw = (s.strip() for s in option.split("=", 1))
            *parents, leaf = dotted.split(".")
            node = tree
            for key in parents:
                node = node.setdefault(key, {})
            node[leaf] = yaml.safe_load(raw)
        return tree

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        return self.options[field_name], field_name, False

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    """Read ``<root>/<field>.yaml``; ``<root>/env.d/<env>/<field>.yaml`` replaces it when present."""

    @functools.cached_property
    def directories(self) -> list[Path]:
        root = self.state["root"]
        if root.scheme != "file" or root.path is None:
            raise SettingsError(f"config root {root} is not a local directory")
        env = self.state["env"]
        base = Path(root.path)
        if env is DeploymentEnvironment.Local:
            # local settings live in the root itself
            return [base]
        return [base, base / "env.d" / env.value]

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        found = [d / f"{field_name}.yaml" for d in self.directories if (d / f"{field_name}.yaml").exists()]
        if not found:
            raise KeyError(field_name)
        return found[-1], field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        path = t.cast(Path, value)
        try:
            return yaml.safe_load(path.read_text(encoding="utf8"))
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: {e}") from e
