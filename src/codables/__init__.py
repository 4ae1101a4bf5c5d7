# ########################
# ##### NOTES ON IMPORT FORMAT
# ########################
#
# This file defines the public API of codables. Imports need to be structured/formatted so as to
# ensure that the broadest possible set of static analyzers understand the public API as intended.
# The below guidelines ensure this is the case.
#
# (1) All imports in this module intended to define exported symbols should be of the form `from
# codables.foo import X as X`. This is because imported symbols are not by default considered
# public by static analyzers. The redundant alias form `import X as X` overwrites the private
# imported `X` with a public `X` bound to the same value.

# (2) All imports should target the module in which a symbol is actually defined, rather than a
# container module where it is imported.

from codables.codable_type import (
	CodableType as CodableType,
)
from codables.codable_type import (
	DEFAULT_CODABLE_TYPE_PRIORITY as DEFAULT_CODABLE_TYPE_PRIORITY,
)
from codables.codable_type import (
	codable_type as codable_type,
)
from codables.codable_type import (
	get_is_codable_type as get_is_codable_type,
)
from codables.coder import (
	Coder as Coder,
)
from codables.coder import (
	clone as clone,
)
from codables.coder import (
	coder as coder,
)
from codables.coder import (
	create_coder as create_coder,
)
from codables.coder import (
	decode as decode,
)
from codables.coder import (
	encode as encode,
)
from codables.coder import (
	parse as parse,
)
from codables.coder import (
	stringify as stringify,
)
from codables.context import (
	DecodeOptions as DecodeOptions,
)
from codables.context import (
	EncodeOptions as EncodeOptions,
)
from codables.context import (
	UnknownMode as UnknownMode,
)
from codables.errors import (
	CodablesError as CodablesError,
)
from codables.errors import (
	DecodeError as DecodeError,
)
from codables.errors import (
	EncodeError as EncodeError,
)
from codables.errors import (
	FrozenCoderError as FrozenCoderError,
)
from codables.errors import (
	ReaderError as ReaderError,
)
from codables.errors import (
	RegistrationError as RegistrationError,
)
from codables.errors import (
	TypeNameConflictError as TypeNameConflictError,
)
from codables.errors import (
	UnknownValueError as UnknownValueError,
)
from codables.errors import (
	UnregisteredClassError as UnregisteredClassError,
)
from codables.errors import (
	UnresolvedReferenceError as UnresolvedReferenceError,
)
from codables.escaper import (
	Escaper as Escaper,
)
from codables.escaper import (
	create_escaper as create_escaper,
)
from codables.format import (
	JSONArray as JSONArray,
)
from codables.format import (
	JSONObject as JSONObject,
)
from codables.format import (
	JSONPrimitive as JSONPrimitive,
)
from codables.format import (
	JSONValue as JSONValue,
)
from codables.readers import (
	Accessor as Accessor,
)
from codables.readers import (
	PathCursor as PathCursor,
)
from codables.readers import (
	Reader as Reader,
)
from codables.registry import (
	TypeRegistry as TypeRegistry,
)
from codables.sentinels import (
	HOLE as HOLE,
)
from codables.sentinels import (
	ExternalReference as ExternalReference,
)
from codables.sentinels import (
	UNDEFINED as UNDEFINED,
)
from codables.sentinels import (
	PendingReference as PendingReference,
)
from codables.sentinels import (
	Symbol as Symbol,
)
from codables.sentinels import (
	external_reference as external_reference,
)

__version__ = "0.1.0"
