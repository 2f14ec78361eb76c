import pytest

from aiscript.definitions.loader import load_definitions

# A small definitions document so expectations do not depend on the bundled one.
TEST_DEFINITIONS = """
<definitions>
  <facts>
    <fact name="move-to"><param type="value"/><param type="value"/></fact>
    <fact name="foo"/>
    <fact name="food-amount"><param type="compareOp"/><param type="value"/></fact>
    <fact name="current-age"><param type="compareOp"/><param type="age"/></fact>
  </facts>
  <actions>
    <action name="bar"/>
    <action name="train"><param type="unit"/></action>
    <action name="chat-to-all"><param type="string"/></action>
    <action name="set-goal"><param type="value"/><param type="value"/></action>
  </actions>
  <parameters>
    <parameter type="compareOp">less-than,greater-than,equal,&lt;,&gt;,==,!=</parameter>
    <parameter type="age">dark-age, feudal-age, castle-age, imperial-age</parameter>
    <parameter type="unit">villager,archer,knight</parameter>
  </parameters>
</definitions>
"""


@pytest.fixture(scope="session")
def symbols():
    return load_definitions(TEST_DEFINITIONS)


@pytest.fixture
def cursor_at():
    """Split a source written with a '|' cursor marker into (text, offset)."""
    def split(marked: str):
        offset = marked.index("|")
        return marked[:offset] + marked[offset + 1:], offset
    return split
