import pytest

from specforce.hooks import HookError, HookResult, execute_hooks


def test_simple_echo():
    results = execute_hooks(["echo hello"])
    assert results[0].success is True
    assert results[0].stdout.strip() == "hello"
    assert results[0].command == "echo hello"


def test_command_with_arguments():
    results = execute_hooks(["ls -l"])
    assert results[0].success is True
    assert results[0].exit_code == 0


def test_failed_command():
    with pytest.raises(HookError) as info:
        execute_hooks(["false"])
    assert str(info.value) == "one or more hooks failed"
    assert info.value.results[0].success is False
    assert info.value.results[0].exit_code == 1


def test_empty_command_string():
    results = execute_hooks([""])
    assert results == [HookResult()]


def test_no_commands():
    assert execute_hooks([]) == []


def test_missing_program():
    with pytest.raises(HookError) as info:
        execute_hooks(["definitely-not-a-real-program-xyz"])
    assert info.value.results[0].exit_code == -1


def test_results_keep_command_order():
    with pytest.raises(HookError) as info:
        execute_hooks(["echo first", "false", "echo third"])
    commands = [result.command for result in info.value.results]
    assert commands == ["echo first", "false", "echo third"]
    assert [result.success for result in info.value.results] == [True, False, True]