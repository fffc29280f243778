from mvattr.mvattr_datatypes import (
    ABSENT, AbsentHandle, AttributeList, EMPTY_ATTR, Handle, IMPLICIT_ARG_NAME,
    InstanceScope, ScalarHandle, SequenceHandle, TemplateInstance,
)
from mvattr.mvattr_errors import (
    ArgumentCountMismatch, Diagnostic, ErrorManager, HandleConsumedError,
    TemplateRenderIssue, UnknownFunctionError, WriterConstructionError,
    WriterConstructionIssue,
)
from mvattr.mvattr_normalize import normalize, is_indexable, is_sized
from mvattr.mvattr_accessors import (
    first, last, rest, trunc, strip, reverse, length, add_to_list,
    apply_function, MULTI_VALUE_FUNCTIONS,
)
from mvattr.mvattr_binder import set_first_argument
from mvattr.mvattr_coerce import to_string
from mvattr.mvattr_writer import (
    AutoIndentWriter, NoIndentWriter, Writer, WriterFactory, default_writer_factory,
)
from mvattr.mvattr_interpreter import Interpreter
