"""
Tests for the command tree.

Focus Areas:
1. Building trees: sibling uniqueness, absolute names, completion registration
2. Help text layout
3. Dispatch: exact token matching, handler fallback, error text
"""

import pytest

from sash import CommandNode, CommandResult, CommandStatus, CompletionRegistry


@pytest.fixture
def completer():
    return CompletionRegistry()


@pytest.fixture
def root(completer):
    return CommandNode("main", completer=completer)


class Recorder:
    """Handler that remembers the arguments it was called with."""

    def __init__(self, result=CommandStatus.EXECUTED):
        self.calls = []
        self.result = result

    def __call__(self, arguments):
        self.calls.append(arguments)
        return self.result


class TestTreeBuilding:
    def test_distinct_siblings_are_added(self, root):
        foo = root.add("foo", "first")
        bar = root.add("bar", "second")

        assert foo is not None and bar is not None
        assert [child.name for child in root.children] == ["foo", "bar"]

    def test_duplicate_sibling_is_rejected(self, root):
        assert root.add("foo") is not None
        assert root.add("foo", "again") is None
        assert len(root.children) == 1

    def test_empty_name_is_rejected(self, root):
        assert root.add("") is None
        assert root.is_leaf

    def test_same_name_allowed_under_different_parents(self, root):
        foo = root.add("foo")
        assert foo.add("foo") is not None

    def test_absolute_name_lists_parents_first(self, root):
        foo = root.add("foo")
        bar = foo.add("bar")

        assert bar.absolute_name() == "foo bar"
        assert foo.absolute_name() == "foo"
        assert root.absolute_name() == ""

    def test_parent_links(self, root):
        foo = root.add("foo")
        bar = foo.add("bar")

        assert bar.parent is foo
        assert foo.parent is root
        assert root.parent is None
        assert root.is_root and not foo.is_root

    def test_added_nodes_register_completions(self, root, completer):
        foo = root.add("foo")
        foo.add("bar")

        assert completer.candidates == ("foo ", "foo bar ")

    def test_root_registers_no_completion(self, completer):
        CommandNode("main", completer=completer)
        assert len(completer) == 0

    def test_add_copy_takes_handler_and_description(self, root):
        source = CommandNode("other")
        template = source.add("quit", "leave")
        handler = Recorder()
        template.set_handler(handler)

        copy = root.add_copy(template)

        assert copy.description == "leave"
        assert copy.handler is handler
        assert root.add_copy(template) is None

    def test_command_decorator_sets_handler(self, root):
        @root.command("echo", "print arguments")
        def echo(arguments):
            return CommandStatus.EXECUTED

        node = root.child("echo")
        assert node.handler is echo
        assert node.description == "print arguments"

    def test_command_decorator_uses_docstring(self, root):
        @root.command("echo")
        def echo(arguments):
            """Print arguments."""

        assert root.child("echo").description == "Print arguments."

    def test_command_decorator_rejects_duplicates(self, root):
        root.add("echo")
        with pytest.raises(ValueError):
            root.command("echo")(lambda arguments: None)


class TestHelp:
    def test_help_aligns_descriptions(self, root):
        root.add("quit", "terminates the shell")
        root.add("st", "shows status")

        assert root.help() == (
            "quit  terminates the shell\n"
            "st    shows status\n"
        )

    def test_help_indent(self, root):
        root.add("a", "alpha")
        assert root.help(indent=4) == "    a  alpha\n"

    def test_help_is_one_level_deep(self, root):
        show = root.add("show", "display things")
        show.add("modes", "list modes")

        assert root.help() == "show  display things\n"
        assert show.help() == "modes  list modes\n"

    def test_help_without_children_is_empty(self, root):
        assert root.help() == ""


class TestExecute:
    def test_empty_line_at_root_is_nop(self, root):
        result = root.execute("")
        assert result.status is CommandStatus.NOP
        assert result.error == ""

    def test_nested_handler_receives_remaining_input(self, root):
        handler = Recorder()
        root.add("foo").add("bar").set_handler(handler)

        result = root.execute("foo bar baz")

        assert result.status is CommandStatus.EXECUTED
        assert handler.calls == ["baz"]

    def test_handler_receives_empty_remainder(self, root):
        handler = Recorder()
        root.add("quit").set_handler(handler)

        root.execute("quit")

        assert handler.calls == [""]

    def test_unknown_token_without_handler(self, root):
        root.add("foo")

        result = root.execute("zzz")

        assert result.status is CommandStatus.NO_COMMAND
        assert result.error == "zzz: command not found"

    def test_unknown_token_reports_only_first_word(self, root):
        result = root.execute("zzz with args")
        assert result.error == "zzz: command not found"

    def test_matching_is_exact_not_prefix(self, root):
        root.add("status").set_handler(Recorder())

        result = root.execute("stat")

        assert result.status is CommandStatus.NO_COMMAND
        assert result.error == "stat: command not found"

    def test_parent_handler_gets_full_line_when_no_child_matches(self, root):
        show = root.add("show")
        show.add("modes").set_handler(Recorder())
        fallback = Recorder()
        show.set_handler(fallback)

        root.execute("show vars x")

        assert fallback.calls == ["vars x"]

    def test_intermediate_node_without_handler_reports_token(self, root):
        root.add("show").add("modes")

        result = root.execute("show vars")

        assert result.status is CommandStatus.NO_COMMAND
        assert result.error == "vars: command not found"

    def test_root_handler_catches_unknown_commands(self, root):
        fallback = Recorder()
        root.set_handler(fallback)

        result = root.execute("anything goes")

        assert result.status is CommandStatus.EXECUTED
        assert fallback.calls == ["anything goes"]

    def test_handler_result_is_forwarded(self, root):
        root.add("fail").set_handler(
            lambda arguments: CommandResult(CommandStatus.NO_COMMAND, "boom"))

        result = root.execute("fail")

        assert result.status is CommandStatus.NO_COMMAND
        assert result.error == "boom"

    def test_handler_returning_none_counts_as_executed(self, root):
        root.add("noop").set_handler(lambda arguments: None)
        assert root.execute("noop").status is CommandStatus.EXECUTED

    def test_handler_returning_garbage_raises(self, root):
        root.add("bad").set_handler(lambda arguments: 42)
        with pytest.raises(TypeError):
            root.execute("bad")

    def test_execute_does_not_mutate_tree(self, root):
        root.add("foo")
        root.execute("zzz")
        root.execute("foo")
        assert [child.name for child in root.children] == ["foo"]
