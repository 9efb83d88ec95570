"""
Tests for most-common-build derivation.
"""

from tierlist.features.aggregation import (
    ImportStringBuild,
    NodeRatesBuild,
    UnavailableBuild,
    derive_most_common_build,
)
from tierlist.features.aggregation.builds import MAX_NODE_RATES, NO_BUILD_REASON


class TestDeriveMostCommonBuild:
    """Test cases for derive_most_common_build."""

    def test_most_frequent_build_string(self, make_entry):
        entries = [
            make_entry(build_string="A"),
            make_entry(build_string="A"),
            make_entry(build_string="B"),
        ]

        build = derive_most_common_build(entries, top_n=200)

        assert isinstance(build, ImportStringBuild)
        assert build.build_import_string == "A"
        assert build.most_common_build == "A"
        assert build.build_frequency == 0.667
        assert build.sample_size == 3
        assert build.build_source == "derived_from_top_performers"

    def test_tie_goes_to_first_seen_build(self, make_entry):
        entries = [
            make_entry(build_string="B"),
            make_entry(build_string="A"),
            make_entry(build_string="A"),
            make_entry(build_string="B"),
        ]

        build = derive_most_common_build(entries, top_n=200)

        assert build.build_import_string == "B"
        assert build.build_frequency == 0.5

    def test_blank_build_strings_are_ignored(self, make_entry):
        """Whitespace-only strings do not count; frequency is over all top entries."""
        entries = [
            make_entry(build_string="  "),
            make_entry(build_string=" A "),
            make_entry(build_string=None),
            make_entry(build_string="A"),
        ]

        build = derive_most_common_build(entries, top_n=200)

        assert build.build_import_string == "A"
        assert build.build_frequency == 0.5

    def test_only_top_n_entries_are_considered(self, make_entry):
        entries = [make_entry(build_string="A")] + [
            make_entry(build_string="B") for _ in range(3)
        ]

        build = derive_most_common_build(entries, top_n=1)

        assert build.build_import_string == "A"
        assert build.sample_size == 1
        assert build.build_frequency == 1.0

    def test_node_pick_rates_without_build_strings(self, make_entry):
        entries = [
            make_entry(talent_nodes=["A1", "A2"]),
            make_entry(talent_nodes=["A1", "B2"]),
            make_entry(talent_nodes=["A1"]),
            make_entry(talent_nodes=None),
        ]

        build = derive_most_common_build(entries, top_n=200)

        assert isinstance(build, NodeRatesBuild)
        assert build.sample_size == 3
        assert build.node_pick_rates[0].node == "A1"
        assert build.node_pick_rates[0].pick_rate == 1.0
        assert {rate.node: rate.pick_rate for rate in build.node_pick_rates[1:]} == {
            "A2": 0.333,
            "B2": 0.333,
        }

    def test_node_pick_rates_are_capped(self, make_entry):
        entries = [make_entry(talent_nodes=[f"node-{i}" for i in range(30)])]

        build = derive_most_common_build(entries, top_n=200)

        assert len(build.node_pick_rates) == MAX_NODE_RATES

    def test_build_strings_win_over_nodes(self, make_entry):
        entries = [
            make_entry(talent_nodes=["A1"]),
            make_entry(build_string="A", talent_nodes=["A1"]),
        ]

        assert isinstance(derive_most_common_build(entries, top_n=200), ImportStringBuild)

    def test_not_available_when_no_build_data(self, make_entry):
        entries = [make_entry(), make_entry(talent_nodes=[])]

        build = derive_most_common_build(entries, top_n=200)

        assert isinstance(build, UnavailableBuild)
        assert build.type == "not_available"
        assert build.build_source == "not_available"
        assert build.reason == NO_BUILD_REASON
        assert build.sample_size == 2

    def test_serialized_shape_carries_type(self, make_entry):
        build = derive_most_common_build([make_entry(build_string="A")], top_n=200)

        assert build.model_dump(mode="json") == {
            "type": "import_string",
            "sample_size": 1,
            "build_source": "derived_from_top_performers",
            "most_common_build": "A",
            "build_import_string": "A",
            "build_frequency": 1.0,
        }
