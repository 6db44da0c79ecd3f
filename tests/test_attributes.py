"""Unit tests for attribute table construction."""

from osmsf.assembly.attributes import AttributeTableBuilder, build_table


class TestAttributeTableBuilder:
    """Tests for AttributeTableBuilder.build."""

    def test_columns_follow_key_universe(self) -> None:
        table = build_table([("1", {"name": "A", "highway": "primary"})], ("highway", "name", "surface"))
        assert list(table.columns) == ["highway", "name", "surface"]
        assert table.index.name == "osm_id"
        assert table.loc["1", "highway"] == "primary"
        assert table.loc["1", "name"] == "A"

    def test_missing_values_are_none(self) -> None:
        table = build_table([("1", {"name": "A"}), ("2", {})], ("highway", "name"))
        assert table.loc["1", "highway"] is None
        assert table.loc["2", "name"] is None
        assert table.loc["2", "highway"] is None

    def test_tag_order_does_not_matter(self) -> None:
        """A feature's row is the same whatever order its tags come in."""
        universe = ("a", "b", "c")
        first = build_table([("1", {"a": "1", "b": "2", "c": "3"})], universe)
        second = build_table([("1", {"c": "3", "a": "1", "b": "2"})], universe)
        assert first.equals(second)

    def test_rows_follow_feature_order(self) -> None:
        table = build_table([("9", {"k": "x"}), ("3", {"k": "y"}), ("5", {"k": "z"})], ("k",))
        assert list(table.index) == ["9", "3", "5"]
        assert list(table["k"]) == ["x", "y", "z"]

    def test_keys_outside_universe_are_dropped_and_counted(self) -> None:
        builder = AttributeTableBuilder(("name",))
        table = builder.build([("1", {"name": "A", "extra": "x", "other": "y"})])
        assert list(table.columns) == ["name"]
        assert builder.dropped == 2

    def test_empty_feature_list(self) -> None:
        table = build_table([], ("name",))
        assert len(table) == 0
        assert list(table.columns) == ["name"]

    def test_empty_key_universe(self) -> None:
        """No keys gives one row per feature and no columns."""
        table = build_table([("1", {}), ("2", {})], ())
        assert len(table) == 2
        assert list(table.columns) == []
        assert list(table.index) == ["1", "2"]
