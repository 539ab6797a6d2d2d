"""Tests for structural pattern detection."""

from gas_guardian.patterns import (
    count_storage_writes,
    count_validations,
    detect_patterns,
    has_external_call,
    has_loop,
)
from gas_guardian.schemas import PatternType


def test_loop_detection():
    """for and while heads are loops; lookalike identifiers are not."""
    assert has_loop("for (uint256 i; i < n; i++) {}")
    assert has_loop("while(true) {}")
    assert not has_loop("format(x); whileLoop = 1;")


def test_storage_writes_counted():
    """Bare, compound and indexed assignments are counted."""
    assert count_storage_writes("value = _value;") == 1
    assert count_storage_writes("x += 1; y -= 2;") == 2
    assert count_storage_writes("balances[to] = amount;") == 1
    assert count_storage_writes("allowed[owner][spender] = amount;") == 1
    assert count_storage_writes("balances[recipients[i]] += amount;") == 1


def test_comparisons_are_not_writes():
    """==, !=, <= and >= never count as assignments."""
    assert count_storage_writes("if (a == b && c != d && e <= f && g >= h) {}") == 0
    assert count_storage_writes("require(balances[from] >= amount);") == 0


def test_mapping_arrow_is_not_a_write():
    assert count_storage_writes("mapping(address => uint256) balances;") == 0


def test_external_call_detection():
    assert has_external_call('(bool ok, ) = to.call{value: amount}("");')
    assert has_external_call("target.delegatecall(data);")
    assert has_external_call("oracle.staticcall(payload);")
    assert not has_external_call("token.transfer(to, amount);")


def test_validation_count():
    assert count_validations("require(a); require(b, 'msg'); assert(c);") == 3
    assert count_validations("required = true;") == 0


def test_detect_patterns_order_and_estimates():
    """Patterns come back in fixed order with count-scaled estimates."""
    code = """function f(address to) public {
        require(msg.sender != address(0));
        require(to != address(0));
        for (uint256 j; j < 3; j++) {
            data[j] = j;
        }
        to.call("");
    }"""
    patterns = detect_patterns(code)

    assert [p.type for p in patterns] == [
        PatternType.LOOP,
        PatternType.STORAGE_WRITE,
        PatternType.EXTERNAL_CALL,
        PatternType.VALIDATION,
    ]
    loop, storage, call, validation = patterns
    assert loop.estimated_gas == 5000
    assert storage.estimated_gas == count_storage_writes(code) * 20000
    assert call.estimated_gas == 2300
    assert validation.estimated_gas == 2 * 500


def test_no_patterns():
    assert detect_patterns("function f() public pure returns (uint256) { return 1; }") == []


def test_detection_is_deterministic():
    code = "function f() public { for (uint i = 0; i < 2; i++) { x[i] = i; } }"
    assert detect_patterns(code) == detect_patterns(code)
