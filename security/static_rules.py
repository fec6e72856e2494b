"""
Static policy rules for review-time risks.

InjectionRisk, WeakPrimitive and XSSRisk are not runtime exceptions: they are
properties of the code itself. This module walks Python ASTs and reports the
patterns the service forbids, so a test (tests/test_static_rules.py) and the
scripts/scan_code.py CLI can enforce them mechanically.

Rules:
    INJECTION_RISK          SQL text built by f-string, +, % or .format();
                            shell=True subprocess calls; os.system / os.popen
    WEAK_PRIMITIVE          md5 / sha1, DES / 3DES / RC4 / Blowfish, ECB mode,
                            any use of the ``random`` module
    XSS_RISK                markup assembled from values not passed through
                            an HTML encoder
    UNSAFE_DESERIALIZATION  pickle / marshal / shelve, yaml.load without a safe
                            loader, stdlib and lxml XML parsers
    HARDCODED_SECRET        string literals assigned to password / secret /
                            key / token names, DSNs with inline passwords
"""

import ast
import enum
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union


class RiskKind(str, enum.Enum):
    INJECTION_RISK = "InjectionRisk"
    WEAK_PRIMITIVE = "WeakPrimitive"
    XSS_RISK = "XSSRisk"
    UNSAFE_DESERIALIZATION = "UnsafeDeserialization"
    HARDCODED_SECRET = "HardcodedSecret"


@dataclass(frozen=True)
class Finding:
    kind: RiskKind
    path: str
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line}: {self.kind.value} {self.message}"


SQL_METHODS = {"execute", "executemany", "executescript", "exec_driver_sql", "raw"}
SQL_FUNCTIONS = {"sqlalchemy.text", "sqlalchemy.sql.text", "sqlalchemy.sql.expression.text"}

SHELL_FUNCTIONS = {"os.system", "os.popen", "commands.getoutput", "commands.getstatusoutput"}
SUBPROCESS_FUNCTIONS = {
    "subprocess.run",
    "subprocess.call",
    "subprocess.check_call",
    "subprocess.check_output",
    "subprocess.Popen",
    "subprocess.getoutput",
}

WEAK_CALLS = {
    "hashlib.md5",
    "hashlib.sha1",
    "Crypto.Cipher.DES.new",
    "Crypto.Cipher.DES3.new",
    "Crypto.Cipher.ARC4.new",
    "Crypto.Cipher.Blowfish.new",
    "Cryptodome.Cipher.DES.new",
    "Cryptodome.Cipher.DES3.new",
    "Cryptodome.Cipher.ARC4.new",
    "cryptography.hazmat.primitives.ciphers.algorithms.TripleDES",
    "cryptography.hazmat.primitives.ciphers.algorithms.ARC4",
    "cryptography.hazmat.primitives.ciphers.modes.ECB",
}
WEAK_HASH_NAMES = {"md5", "sha1", "md4", "md5-sha1"}
WEAK_ATTRIBUTES = {"Crypto.Cipher.AES.MODE_ECB", "Cryptodome.Cipher.AES.MODE_ECB"}
WEAK_MODULES = {"random"}

UNSAFE_DESERIALIZERS = {
    "pickle.load",
    "pickle.loads",
    "pickle.Unpickler",
    "_pickle.loads",
    "cPickle.loads",
    "marshal.load",
    "marshal.loads",
    "shelve.open",
    "dill.load",
    "dill.loads",
    "jsonpickle.decode",
    "yaml.unsafe_load",
    "yaml.full_load",
    "xml.etree.ElementTree.parse",
    "xml.etree.ElementTree.fromstring",
    "xml.etree.ElementTree.XML",
    "xml.etree.ElementTree.XMLParser",
    "xml.etree.ElementTree.iterparse",
    "xml.dom.minidom.parse",
    "xml.dom.minidom.parseString",
    "xml.dom.pulldom.parse",
    "xml.dom.pulldom.parseString",
    "xml.sax.parse",
    "xml.sax.parseString",
    "xml.sax.make_parser",
    "lxml.etree.parse",
    "lxml.etree.fromstring",
    "lxml.etree.XML",
}
SAFE_YAML_LOADERS = {"SafeLoader", "CSafeLoader", "BaseLoader"}

HTML_ENCODERS = {"encode_for_html", "escape", "markupsafe.escape", "html.escape", "bleach.clean"}
_MARKUP_RE = re.compile(r"</?[A-Za-z][\w-]*(\s[^<>]*)?/?>")
_PLACEHOLDER = "\x00"

_SECRET_NAME_RE = re.compile(
    r"(?i)(^|_)(password|passwd|pwd|secret|secret_?key|api_?key|token|private_?key|access_?key)$"
)
_INLINE_DSN_PASSWORD_RE = re.compile(r"\w+://[^/\s:@]+:[^/\s@]+@")


def _is_str_constant(node: ast.AST) -> bool:
    return isinstance(node, ast.Constant) and isinstance(node.value, str)


class _PolicyVisitor(ast.NodeVisitor):
    def __init__(self, path: str):
        self.path = path
        self.findings: List[Finding] = []
        self.aliases: Dict[str, str] = {}
        # names bound to dynamically built strings, one frame per function
        self.scopes: List[Dict[str, bool]] = [{}]
        # enum members are labels, not credentials
        self.enum_bodies: List[bool] = [False]

    # -- helpers ---------------------------------------------------------

    def report(self, kind: RiskKind, node: ast.AST, message: str) -> None:
        self.findings.append(Finding(kind, self.path, getattr(node, "lineno", 0), message))

    def qualified_name(self, node: ast.AST) -> Optional[str]:
        if isinstance(node, ast.Name):
            return self.aliases.get(node.id, node.id)
        if isinstance(node, ast.Attribute):
            base = self.qualified_name(node.value)
            return f"{base}.{node.attr}" if base else None
        return None

    def is_tainted(self, name: str) -> bool:
        return any(scope.get(name) for scope in reversed(self.scopes))

    def is_dynamic_string(self, node: ast.AST) -> bool:
        if isinstance(node, ast.JoinedStr):
            return any(isinstance(v, ast.FormattedValue) for v in node.values)
        if isinstance(node, ast.BinOp):
            if isinstance(node.op, ast.Add):
                sides = (node.left, node.right)
                stringy = any(
                    _is_str_constant(s) or isinstance(s, ast.JoinedStr) or self.is_dynamic_string(s)
                    for s in sides
                )
                return stringy and not all(_is_str_constant(s) for s in sides)
            if isinstance(node.op, ast.Mod):
                return _is_str_constant(node.left) and not isinstance(node.right, ast.Constant)
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
            if node.func.attr == "format" and _is_str_constant(node.func.value):
                return bool(node.args or node.keywords)
        if isinstance(node, ast.Name):
            return self.is_tainted(node.id)
        return False

    def _flatten_concat(self, node: ast.AST) -> List[ast.AST]:
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.Add):
            return self._flatten_concat(node.left) + self._flatten_concat(node.right)
        return [node]

    def _is_encoded(self, node: ast.AST) -> bool:
        if isinstance(node, ast.FormattedValue):
            node = node.value
        if isinstance(node, ast.Constant):
            return True
        if isinstance(node, ast.Call):
            name = self.qualified_name(node.func) or ""
            return name in HTML_ENCODERS or name.split(".")[-1] in HTML_ENCODERS
        return False

    def check_markup(self, node: ast.AST, parts: List[ast.AST]) -> None:
        literal = "".join(
            p.value if _is_str_constant(p) else _PLACEHOLDER for p in parts
        )
        if not _MARKUP_RE.search(literal.replace(_PLACEHOLDER, "x")):
            return
        dynamic = [p for p in parts if not _is_str_constant(p)]
        if any(not self._is_encoded(p) for p in dynamic):
            self.report(RiskKind.XSS_RISK, node, "markup built from an unencoded value")

    # -- imports ---------------------------------------------------------

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.asname:
                self.aliases[alias.asname] = alias.name
            else:
                root = alias.name.split(".")[0]
                self.aliases[root] = root
            if alias.name.split(".")[0] in WEAK_MODULES:
                self.report(RiskKind.WEAK_PRIMITIVE, node, f"import of '{alias.name}' (not a CSPRNG)")

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        module = node.module or ""
        for alias in node.names:
            qualified = f"{module}.{alias.name}" if module else alias.name
            self.aliases[alias.asname or alias.name] = qualified
        if module.split(".")[0] in WEAK_MODULES:
            self.report(RiskKind.WEAK_PRIMITIVE, node, f"import from '{module}' (not a CSPRNG)")

    # -- scopes ----------------------------------------------------------

    def _visit_scope(self, node: ast.AST) -> None:
        self.scopes.append({})
        self.enum_bodies.append(False)
        self.generic_visit(node)
        self.enum_bodies.pop()
        self.scopes.pop()

    visit_FunctionDef = _visit_scope
    visit_AsyncFunctionDef = _visit_scope
    visit_Lambda = _visit_scope

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        is_enum = any(
            (self.qualified_name(base) or "").split(".")[-1].endswith(("Enum", "Flag"))
            for base in node.bases
        )
        self.enum_bodies.append(is_enum)
        self.scopes.append({})
        self.generic_visit(node)
        self.scopes.pop()
        self.enum_bodies.pop()

    # -- statements ------------------------------------------------------

    def visit_Assign(self, node: ast.Assign) -> None:
        dynamic = self.is_dynamic_string(node.value)
        for target in node.targets:
            if isinstance(target, ast.Name):
                self.scopes[-1][target.id] = dynamic
            self._check_secret_assignment(target, node.value, node)
        self.generic_visit(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if node.value is not None:
            if isinstance(node.target, ast.Name):
                self.scopes[-1][node.target.id] = self.is_dynamic_string(node.value)
            self._check_secret_assignment(node.target, node.value, node)
        self.generic_visit(node)

    def _check_secret_assignment(self, target: ast.AST, value: ast.AST, node: ast.AST) -> None:
        if self.enum_bodies[-1]:
            return
        name = None
        if isinstance(target, ast.Name):
            name = target.id
        elif isinstance(target, ast.Attribute):
            name = target.attr
        if name and _SECRET_NAME_RE.search(name) and _is_str_constant(value) and value.value:
            self.report(RiskKind.HARDCODED_SECRET, node, f"literal assigned to '{name}'")

    # -- expressions -----------------------------------------------------

    def visit_Constant(self, node: ast.Constant) -> None:
        if isinstance(node.value, str) and _INLINE_DSN_PASSWORD_RE.search(node.value):
            self.report(RiskKind.HARDCODED_SECRET, node, "connection string with inline password")

    def visit_JoinedStr(self, node: ast.JoinedStr) -> None:
        self.check_markup(node, list(node.values))
        self.generic_visit(node)

    def visit_BinOp(self, node: ast.BinOp) -> None:
        if isinstance(node.op, ast.Add):
            parts = self._flatten_concat(node)
            if any(_is_str_constant(p) for p in parts):
                self.check_markup(node, parts)
            # children of the chain were checked as one expression
            for part in parts:
                self.visit(part)
            return
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        name = self.qualified_name(node)
        if name in WEAK_ATTRIBUTES:
            self.report(RiskKind.WEAK_PRIMITIVE, node, f"use of {name}")
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:
        name = self.qualified_name(node.func) or ""
        self._check_sql(node, name)
        self._check_command(node, name)
        self._check_crypto(node, name)
        self._check_deserialization(node, name)
        for keyword in node.keywords:
            if keyword.arg and _SECRET_NAME_RE.search(keyword.arg):
                if _is_str_constant(keyword.value) and keyword.value.value:
                    self.report(RiskKind.HARDCODED_SECRET, node, f"literal passed as '{keyword.arg}'")
        self.generic_visit(node)

    def _check_sql(self, node: ast.Call, name: str) -> None:
        is_sink = (
            name in SQL_FUNCTIONS
            or name.split(".")[-1] == "bound_query"
            or (isinstance(node.func, ast.Attribute) and node.func.attr in SQL_METHODS)
        )
        if is_sink and node.args and self.is_dynamic_string(node.args[0]):
            self.report(
                RiskKind.INJECTION_RISK, node, "query text built from runtime values; use bound parameters"
            )

    def _check_command(self, node: ast.Call, name: str) -> None:
        if name in SHELL_FUNCTIONS:
            self.report(RiskKind.INJECTION_RISK, node, f"shell command via {name}")
        elif name in SUBPROCESS_FUNCTIONS:
            for keyword in node.keywords:
                if keyword.arg == "shell" and isinstance(keyword.value, ast.Constant) and keyword.value.value:
                    self.report(RiskKind.INJECTION_RISK, node, f"{name} with shell=True")

    def _check_crypto(self, node: ast.Call, name: str) -> None:
        if name in WEAK_CALLS:
            self.report(RiskKind.WEAK_PRIMITIVE, node, f"call to {name}")
        elif name == "hashlib.new" and node.args and _is_str_constant(node.args[0]):
            if node.args[0].value.lower() in WEAK_HASH_NAMES:
                self.report(RiskKind.WEAK_PRIMITIVE, node, f"hashlib.new('{node.args[0].value}')")
        elif name.split(".")[0] in WEAK_MODULES:
            self.report(RiskKind.WEAK_PRIMITIVE, node, f"call to {name} (not a CSPRNG)")

    def _check_deserialization(self, node: ast.Call, name: str) -> None:
        if name in UNSAFE_DESERIALIZERS:
            self.report(RiskKind.UNSAFE_DESERIALIZATION, node, f"call to {name}")
        elif name == "yaml.load":
            loader = next((k.value for k in node.keywords if k.arg == "Loader"), None)
            if loader is None and len(node.args) > 1:
                loader = node.args[1]
            loader_name = (self.qualified_name(loader) or "") if loader is not None else ""
            if loader_name.split(".")[-1] not in SAFE_YAML_LOADERS:
                self.report(RiskKind.UNSAFE_DESERIALIZATION, node, "yaml.load without a safe Loader")


def scan_source(source: str, path: str = "<string>") -> List[Finding]:
    """Scan one module's source text. SyntaxError propagates to the caller."""
    tree = ast.parse(source, filename=path)
    visitor = _PolicyVisitor(path)
    visitor.visit(tree)
    return sorted(visitor.findings, key=lambda f: (f.path, f.line, f.kind.value))


def scan_file(path: Union[str, Path]) -> List[Finding]:
    path = Path(path)
    return scan_source(path.read_text(encoding="utf-8"), str(path))


def iter_python_files(paths: Iterable[Union[str, Path]], exclude: Iterable[str] = ()) -> Iterable[Path]:
    excluded = set(exclude)
    for root in paths:
        root = Path(root)
        candidates = [root] if root.is_file() else sorted(root.rglob("*.py"))
        for candidate in candidates:
            if excluded.intersection(candidate.parts):
                continue
            yield candidate


def scan_paths(paths: Iterable[Union[str, Path]], exclude: Iterable[str] = ()) -> List[Finding]:
    """Scan files and directories (recursively), skipping any path with an excluded part."""
    findings: List[Finding] = []
    for file_path in iter_python_files(paths, exclude):
        findings.extend(scan_file(file_path))
    return findings
