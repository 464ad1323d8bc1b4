"""Proto3 schema synthesis from extracted Go structs."""

from .emitter import SchemaEmitter
from .services import collect_services, infer_base_name, rpc_methods
from .type_mapper import map_type

__all__ = ["SchemaEmitter", "collect_services", "infer_base_name", "map_type", "rpc_methods"]
