"""Groups of columns, views made of groups, and a catalog of views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import yaml

from myqtools.columns import Column, StateViewer
from myqtools.metrics import ColumnParseError, SampleTimeCol, _base_fields, parse_columns
from myqtools.state import State
from myqtools.textfit import fit_string_left, push_col_output_down, push_col_output_up

_TIME_COL = SampleTimeCol()


@dataclass
class GroupCol(Column):
    """A list of related columns shown under a common heading."""

    cols: list[StateViewer] = field(default_factory=list)

    def detailed_help(self) -> list[str]:
        output = [self.short_help()]
        for col in self.cols:
            output.extend(f"   {line}" for line in col.detailed_help())
        return output

    def header(self, state: State) -> list[str]:
        """The group name, then the headers of its columns."""
        outputs = push_col_output_down(self.cols, lambda col: col.header(state))
        length = self.length
        if length == 0 and outputs:
            length = len(outputs[0])
        return [fit_string_left(self.name, length), *outputs]

    def data(self, state: State) -> list[str]:
        return push_col_output_up(self.cols, lambda col: col.data(state))


@dataclass
class View(GroupCol):
    """A time column followed by groups, then any standalone columns."""

    groups: list[GroupCol] = field(default_factory=list)

    def _viewers(self) -> list[StateViewer]:
        return [_TIME_COL, *self.groups, *self.cols]

    def detailed_help(self) -> list[str]:
        output = [self.short_help()]
        for viewer in [*self.groups, *self.cols]:
            output.extend(f"   {line}" for line in viewer.detailed_help())
        return output

    def get_sources(self) -> list[str]:
        return []

    def header(self, state: State) -> list[str]:
        return push_col_output_down(self._viewers(), lambda sv: sv.header(state))

    def data(self, state: State) -> list[str]:
        return push_col_output_up(self._viewers(), lambda sv: sv.data(state))


def _list(mapping: Mapping[str, Any], name: str) -> list[Any]:
    value = mapping.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ColumnParseError(f"{name} must be a list, got: {value!r}")
    return value


def _group_from_mapping(mapping: Any) -> GroupCol:
    if not isinstance(mapping, Mapping):
        raise ColumnParseError(f"group definition must be a mapping, got: {mapping!r}")
    return GroupCol(**_base_fields(mapping), cols=parse_columns(_list(mapping, "cols")))


def _view_from_mapping(mapping: Any) -> View:
    if not isinstance(mapping, Mapping):
        raise ColumnParseError(f"view definition must be a mapping, got: {mapping!r}")
    return View(
        **_base_fields(mapping),
        cols=parse_columns(_list(mapping, "cols")),
        groups=[_group_from_mapping(item) for item in _list(mapping, "groups")],
    )


@dataclass
class ViewCatalog:
    """Views by name, with their names in sorted order."""

    names: list[str] = field(default_factory=list)
    views: dict[str, View] = field(default_factory=dict)

    def parse(self, yaml_str: str) -> None:
        """Replace the catalog with the views listed in ``yaml_str``."""
        try:
            loaded = yaml.safe_load(yaml_str)
        except yaml.YAMLError as exc:
            raise ColumnParseError(f"invalid yaml: {exc}") from exc
        if loaded is None:
            loaded = []
        if not isinstance(loaded, list):
            raise ColumnParseError("expected a list of views")

        views = [_view_from_mapping(item) for item in loaded]
        self.views = {view.name: view for view in views}
        self.names = sorted(view.name for view in views)

    def get_viewer(self, name: str) -> View:
        """Look up a view by name; raise KeyError if it is unknown."""
        try:
            return self.views[name]
        except KeyError:
            raise KeyError(f"view {name} not found") from None