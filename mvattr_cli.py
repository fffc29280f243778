import sys
from pathlib import Path

from mvattr.mvattr_datatypes import TemplateInstance
from mvattr.mvattr_interpreter import Interpreter
from mvattr.mvattr_serialize import load_attributes

USAGE = "usage: mvattr_cli.py TEMPLATE [DATA] [--debug]"


def render_file(template_path: str, data_path: str | None = None, debug: bool | None = None) -> int:
    """Render a Mustache template file against a JSON/YAML attribute file."""
    t = Path(template_path)
    try:
        template = t.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file not found: {template_path}", file=sys.stderr)
        return 1
    attrs = {}
    if data_path is not None:
        try:
            attrs = load_attributes(data_path)
        except FileNotFoundError:
            print(f"Error: file not found: {data_path}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    st = TemplateInstance(t.stem, template)
    for name, value in attrs.items():
        st.add(str(name), value)

    interp = Interpreter(debug=debug)
    text = interp.exec_instance(st)
    # Diagnostics are reported but do not fail the render
    for effect in interp.err_mgr.side_effects:
        if effect.get('topics') == ['stderr']:
            print(effect.get('message', ''), file=sys.stderr)
    if interp.debug:
        for event in interp.events:
            print(f"[EVAL] {event.name} {event.output_start}..{event.output_stop}", file=sys.stderr)
    print(text)
    return 0


def main(argv=None) -> int:
    """Run the renderer with command-line arguments."""
    args = list(sys.argv[1:] if argv is None else argv)
    debug = None
    if "--debug" in args:
        args.remove("--debug")
        debug = True
    if not args or len(args) > 2 or any(a.startswith("-") for a in args):
        print(USAGE, file=sys.stderr)
        return 2
    return render_file(args[0], args[1] if len(args) > 1 else None, debug=debug)


if __name__ == "__main__":
    raise SystemExit(main())
