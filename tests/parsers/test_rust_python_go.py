"""Tests for the Rust, Python and Go structural extractors."""

from __future__ import annotations

import textwrap

from ctxscan.models import ElementKind
from ctxscan.parsers.go import analyze_go
from ctxscan.parsers.python import analyze_python
from ctxscan.parsers.rust import analyze_rust


def _src(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_rust_extracts_modules_structs_and_functions() -> None:
    structure = analyze_rust(
        _src(
            """
            mod config;
            pub(crate) mod util;

            /// A point in space.
            #[derive(Debug)]
            pub struct Point {
                x: i32,
            }

            struct Unit;
            pub struct Wrapper(u8);

            pub enum Shape {
                Circle,
            }

            trait Draw {
                fn draw(&self);
            }

            pub async fn fetch(url: &str) -> String {
                todo!()
            }
            """
        )
    )

    kinds = [(element.name, element.kind) for element in structure.elements]
    assert ("config", ElementKind.MODULE) in kinds
    assert ("util", ElementKind.MODULE) in kinds
    assert ("Point", ElementKind.STRUCT) in kinds
    assert ("Unit", ElementKind.STRUCT) in kinds
    assert ("Wrapper", ElementKind.STRUCT) in kinds
    assert ("Shape", ElementKind.ENUM) in kinds
    assert ("Draw", ElementKind.TRAIT) in kinds
    assert ("draw", ElementKind.FUNCTION) in kinds
    assert ("fetch", ElementKind.FUNCTION) in kinds
    assert structure.language == "rust"

    point = next(element for element in structure.elements if element.name == "Point")
    assert point.description == "A point in space."
    assert point.line == 6


def test_rust_skips_declarations_missing_delimiters() -> None:
    structure = analyze_rust("mod inline {\nstruct\nenum Half\nfn\n")

    assert structure.elements == []


def test_rust_doc_buffer_clears_on_plain_lines() -> None:
    structure = analyze_rust("/// stale\nlet x = 1;\nfn run() {}\n")

    assert structure.elements[0].name == "run"
    assert structure.elements[0].description is None


def test_python_distinguishes_methods_from_functions() -> None:
    structure = analyze_python(
        _src(
            """
            import os

            # Handles requests.
            class Handler(Base):
                def get(self):
                    pass

                @property
                async def post(self):
                    pass

            def helper():
                return 1
            """
        )
    )

    kinds = {element.name: element.kind for element in structure.elements}
    assert kinds == {
        "Handler": ElementKind.CLASS,
        "get": ElementKind.METHOD,
        "post": ElementKind.METHOD,
        "helper": ElementKind.FUNCTION,
    }
    handler = structure.elements[0]
    assert handler.description == "Handles requests."
    assert handler.line == 4


def test_python_decorator_keeps_comment_description() -> None:
    structure = analyze_python("# Cached lookup\n@lru_cache\ndef lookup(key):\n    pass\n")

    assert structure.elements[0].description == "Cached lookup"


def test_python_unindented_comment_keeps_class_open() -> None:
    structure = analyze_python(
        "class Handler:\n"
        "    def get(self):\n"
        "        pass\n"
        "# write side\n"
        "    def post(self):\n"
        "        pass\n"
        "def helper():\n"
        "    pass\n"
    )

    kinds = [(element.name, element.kind) for element in structure.elements]
    assert kinds == [
        ("Handler", ElementKind.CLASS),
        ("get", ElementKind.METHOD),
        ("post", ElementKind.METHOD),
        ("helper", ElementKind.FUNCTION),
    ]
    assert structure.elements[2].description == "write side"


def test_go_extracts_package_types_and_funcs() -> None:
    structure = analyze_go(
        _src(
            """
            package server

            // Server handles HTTP.
            type Server struct {
                addr string
            }

            type Handler interface {
                Serve()
            }

            func (s *Server) Start() error {
                return nil
            }

            func New(addr string) *Server {
                return &Server{addr: addr}
            }
            """
        )
    )

    kinds = [(element.name, element.kind) for element in structure.elements]
    assert kinds == [
        ("server", ElementKind.MODULE),
        ("Server", ElementKind.STRUCT),
        ("Handler", ElementKind.INTERFACE),
        ("Start", ElementKind.METHOD),
        ("New", ElementKind.FUNCTION),
    ]
    assert structure.elements[1].description == "Server handles HTTP."
