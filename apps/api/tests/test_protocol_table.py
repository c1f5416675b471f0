"""
Tests for the protocol table.

Every protocol's buckets must cover every integer day exactly once; the
table is validated when the module loads.
"""
import pytest

from core.exceptions import ProtocolTableError
from services.weight_cut.constants import FluidType, NutritionMode, Protocol
from services.weight_cut.protocol_table import (
    PROTOCOL_TABLE,
    STEADY_HYDRATION,
    ProtocolBucket,
    coerce_protocol,
    get_protocol,
    is_water_loading_day,
    lookup_bucket,
    validate_buckets,
    validate_protocol_table,
    water_load_bonus,
)


def _bucket(min_days, max_days):
    return ProtocolBucket(min_days, max_days, 1.0, STEADY_HYDRATION, None, "")


class TestTableIntegrity:
    """Load-time validation"""

    def test_shipped_table_is_valid(self):
        validate_protocol_table()

    def test_every_protocol_present(self):
        assert set(PROTOCOL_TABLE) == set(Protocol)

    @pytest.mark.parametrize("protocol", list(Protocol))
    def test_exactly_one_bucket_per_day(self, protocol):
        """-5..+30 days: one and only one bucket matches"""
        buckets = PROTOCOL_TABLE[protocol].buckets
        for days in range(-5, 31):
            matches = [b for b in buckets if b.contains(days)]
            assert len(matches) == 1, f"protocol {protocol.value} day {days}"

    def test_gap_rejected(self):
        buckets = (_bucket(None, 0), _bucket(2, None))
        with pytest.raises(ProtocolTableError, match="gap"):
            validate_buckets(Protocol.RAPID_CUT, buckets)

    def test_overlap_rejected(self):
        buckets = (_bucket(None, 3), _bucket(3, None))
        with pytest.raises(ProtocolTableError, match="overlap"):
            validate_buckets(Protocol.RAPID_CUT, buckets)

    def test_missing_lower_bound_rejected(self):
        buckets = (_bucket(-1, 5), _bucket(6, None))
        with pytest.raises(ProtocolTableError):
            validate_buckets(Protocol.RAPID_CUT, buckets)

    def test_missing_upper_bound_rejected(self):
        buckets = (_bucket(None, 5), _bucket(6, 10))
        with pytest.raises(ProtocolTableError):
            validate_buckets(Protocol.RAPID_CUT, buckets)

    def test_missing_protocol_rejected(self):
        table = {p: d for p, d in PROTOCOL_TABLE.items() if p != Protocol.BUILD}
        with pytest.raises(ProtocolTableError, match="4"):
            validate_protocol_table(table)


class TestLookup:
    """lookup_bucket never raises"""

    @pytest.mark.parametrize("days,multiplier", [
        (-3, 1.07), (-1, 1.07), (0, 1.00), (1, 1.03), (2, 1.04),
        (3, 1.05), (4, 1.06), (5, 1.07), (6, 1.07), (45, 1.07),
    ])
    def test_rapid_cut_multipliers(self, days, multiplier):
        assert lookup_bucket(Protocol.RAPID_CUT, days).weight_multiplier == multiplier

    @pytest.mark.parametrize("days,multiplier", [
        (-1, 1.05), (0, 1.00), (1, 1.03), (2, 1.04), (3, 1.05), (5, 1.05), (20, 1.05),
    ])
    def test_hold_weight_multipliers(self, days, multiplier):
        assert lookup_bucket(Protocol.HOLD_WEIGHT, days).weight_multiplier == multiplier

    @pytest.mark.parametrize("protocol", [Protocol.BUILD, Protocol.SPAR])
    def test_steady_protocols_never_manipulate(self, protocol):
        for days in range(-5, 15):
            bucket = lookup_bucket(protocol, days)
            assert bucket.weight_multiplier == 1.0
            assert bucket.hydration.fluid_type == FluidType.REGULAR
            assert bucket.hydration.oz_per_lb == 0.75

    def test_string_ids_accepted(self):
        assert lookup_bucket("1", 2) is lookup_bucket(Protocol.EXTREME_CUT, 2)

    def test_unknown_protocol_falls_back_to_default(self):
        assert coerce_protocol("9") == Protocol.RAPID_CUT
        assert coerce_protocol(None) == Protocol.RAPID_CUT
        assert lookup_bucket("9", 3) is lookup_bucket(Protocol.RAPID_CUT, 3)

    def test_fluid_transitions(self):
        """Regular -> Distilled -> Sip-Only -> Rehydrate as weigh-in nears"""
        types = [lookup_bucket(Protocol.RAPID_CUT, d).hydration.fluid_type for d in (3, 2, 1, 0)]
        assert types == [FluidType.REGULAR, FluidType.DISTILLED, FluidType.SIP_ONLY, FluidType.REHYDRATE]

    def test_portion_protocols_have_no_gram_rules(self):
        assert get_protocol(Protocol.SPAR).nutrition_mode == NutritionMode.SLICES
        assert lookup_bucket(Protocol.SPAR_COMPETITION, 3).macros is None

    def test_protein_rate_buckets(self):
        recovery = lookup_bucket(Protocol.BUILD, -1).macros
        assert recovery.protein_per_lb == 1.6


class TestWaterLoadBonus:
    """Tier lookup by inclusive range"""

    @pytest.mark.parametrize("weight_class,bonus", [
        (125, 2), (149, 2), (149.5, 2), (150, 3), (165, 3), (174, 3), (174.9, 3), (175, 4), (285, 4),
    ])
    def test_tiers(self, weight_class, bonus):
        assert water_load_bonus(weight_class) == bonus

    def test_loading_days(self):
        assert [is_water_loading_day(Protocol.RAPID_CUT, d) for d in range(0, 8)] == [
            False, False, False, True, True, True, False, False,
        ]

    def test_only_bonus_protocols_load(self):
        assert is_water_loading_day(Protocol.EXTREME_CUT, 4)
        assert not is_water_loading_day(Protocol.HOLD_WEIGHT, 4)
        assert not is_water_loading_day(Protocol.SPAR_COMPETITION, 4)
