"""
Tests for declaration classification and component detail extraction.
"""

from modgraph.core.classifier import classify_declarations
from modgraph.core.entities import NodeType
from modgraph.core.walk import count_lines

from conftest import parse_tsx, SAMPLE_FUNCTION_COMPONENT, SAMPLE_ARROW_COMPONENT


FILE = "/repo/src/File.tsx"


def _by_name(code: str) -> dict:
    return {d.name: d for d in classify_declarations(parse_tsx(code), FILE)}


def test_jsx_return_is_component_plain_return_is_utility():
    decls = _by_name("""
        function Title() {
          return <h1>Hello</h1>;
        }

        function answer() {
          return 42;
        }
    """)

    assert decls["Title"].type == NodeType.COMPONENT
    assert decls["answer"].type == NodeType.UTILITY
    assert decls["Title"].unique_id == f"Title:{FILE}"


def test_arrow_expression_body():
    decls = _by_name("""
        const Badge = () => <span className="badge" />;
        const double = (n: number) => n * 2;
        const wrapped = () => (
          <div />
        );
    """)

    assert decls["Badge"].type == NodeType.COMPONENT
    assert decls["double"].type == NodeType.UTILITY
    assert decls["wrapped"].type == NodeType.COMPONENT


def test_function_expression_initializer():
    decls = _by_name("""
        const Legacy = function () {
          return <p>old</p>;
        };
    """)

    assert decls["Legacy"].type == NodeType.COMPONENT


def test_no_return_is_utility():
    decls = _by_name("""
        function noop() {}
        function log(msg: string) { console.log(msg); }
    """)

    assert decls["noop"].type == NodeType.UTILITY
    assert decls["log"].type == NodeType.UTILITY


def test_nested_function_return_does_not_decide():
    decls = _by_name("""
        function Page() {
          const format = (s: string) => {
            return s.trim();
          };
          return <main>{format(" x ")}</main>;
        }
    """)

    assert decls["Page"].type == NodeType.COMPONENT
    assert decls["format"].type == NodeType.UTILITY


def test_class_component_render():
    decls = _by_name("""
        class Panel extends React.Component {
          render() {
            return <section title="panel" />;
          }
        }

        class Store {
          read() {
            return 1;
          }
        }
    """)

    assert decls["Panel"].type == NodeType.COMPONENT
    assert decls["Panel"].child_props == {"title"}
    assert decls["Store"].type == NodeType.UTILITY


def test_unnamed_declarations_are_skipped_but_traversed():
    decls = _by_name("""
        export default function () {
          function Inner() {
            return <div />;
          }
          return Inner;
        }

        const { a, b } = (() => ({ a: 1, b: 2 }))();
    """)

    assert set(decls) == {"Inner"}
    assert decls["Inner"].type == NodeType.COMPONENT


def test_only_function_initializers_are_candidates():
    decls = _by_name("""
        const LIMIT = 10;
        const element = <div />;
    """)

    assert decls == {}


def test_sample_function_component_details():
    decls = _by_name(SAMPLE_FUNCTION_COMPONENT)

    component = decls["SampleFunctionComponent"]
    assert component.type == NodeType.COMPONENT
    assert component.hooks == {"useState", "useEffect"}
    assert component.state_variables == {"count", "test"}
    assert component.state_setters == {"setCount"}
    assert component.incoming_props == {"name", "otherName"}
    assert component.child_props == {"className"}

    # The nested helper returns a plain value
    assert decls["testFunction"].type == NodeType.UTILITY


def test_sample_arrow_component_details():
    decls = _by_name(SAMPLE_ARROW_COMPONENT)

    component = decls["SampleArrowComponent"]
    assert component.type == NodeType.COMPONENT
    assert component.hooks == {"useState"}
    assert component.state_variables == {"name"}
    assert component.state_setters == {"setName"}
    assert component.incoming_props == {"lastName"}
    assert component.child_props == set()


def test_qualified_hooks_and_child_props():
    decls = _by_name("""
        function Form() {
          const ref = React.useRef(null);
          const value = useFormValue();
          const [open, setOpen] = React.useState(false);
          return (
            <form onSubmit={save}>
              <Input ref={ref} value={value} disabled />
            </form>
          );
        }
    """)

    form = decls["Form"]
    assert form.hooks == {"React.useRef", "useFormValue", "React.useState"}
    # Only a bare useState call counts as state
    assert form.state_variables == set()
    assert form.child_props == {"onSubmit", "ref", "value", "disabled"}


def test_named_props_type_yields_no_incoming_props():
    decls = _by_name("""
        interface CardProps { title: string }

        function Card(props: CardProps) {
          return <div>{props.title}</div>;
        }

        function Bare(props) {
          return <div />;
        }
    """)

    assert decls["Card"].incoming_props == set()
    assert decls["Bare"].incoming_props == set()


def test_state_hole_keeps_setter_only():
    decls = _by_name("""
        function Counter() {
          const [, setTick] = useState(0);
          const { data } = useState({ data: 1 });
          return <b />;
        }
    """)

    assert decls["Counter"].state_variables == set()
    assert decls["Counter"].state_setters == {"setTick"}


def test_declaration_positions():
    decls = _by_name("""
        function One() {
          return <i />;
        }
    """)

    assert decls["One"].start_line == 2
    assert decls["One"].end_line == 4


def test_count_lines():
    assert count_lines("") == 0
    assert count_lines("a\nb\n") == 2
    assert count_lines("a\n\n// note\nb") == 4
