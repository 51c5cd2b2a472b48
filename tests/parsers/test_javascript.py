"""Tests for the JavaScript/TypeScript structural extractor."""

from __future__ import annotations

import textwrap

from ctxscan.models import ElementKind
from ctxscan.parsers.javascript import analyze_javascript, returns_jsx


def _src(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_class_component_is_reported_once() -> None:
    structure = analyze_javascript(
        _src(
            """
            import React from 'react';

            class Foo extends React.Component {
              render() {
                return <div />;
              }
            }

            export class Plain {}
            """
        )
    )

    foo = [element for element in structure.elements if element.name == "Foo"]
    assert len(foo) == 1
    assert foo[0].kind == ElementKind.COMPONENT
    assert structure.of_kind(ElementKind.CLASS)[0].name == "Plain"
    assert "Foo" not in [element.name for element in structure.of_kind(ElementKind.CLASS)]


def test_function_components_require_jsx_return() -> None:
    structure = analyze_javascript(
        _src(
            """
            export function Header({ title }) {
              const upper = title.toUpperCase();
              return (
                <h1>{upper}</h1>
              );
            }

            export const Footer = () => <footer />;

            function Config() {
              return { debug: true };
            }

            const formatDate = (value) => value.toISOString();
            """
        )
    )

    kinds = {element.name: element.kind for element in structure.elements}
    assert kinds["Header"] == ElementKind.COMPONENT
    assert kinds["Footer"] == ElementKind.COMPONENT
    assert kinds["Config"] == ElementKind.FUNCTION
    assert kinds["formatDate"] == ElementKind.FUNCTION


def test_hooks_are_tagged_with_metadata() -> None:
    structure = analyze_javascript(
        _src(
            """
            export function useCounter(initial) {
              return useState(initial);
            }
            """
        )
    )

    hook = structure.elements[0]
    assert hook.kind == ElementKind.HOOK
    assert hook.metadata is not None
    assert hook.metadata.is_hook is True
    assert hook.metadata.hook_name == "useCounter"


def test_angular_decorators_resolve_to_following_class() -> None:
    structure = analyze_javascript(
        _src(
            """
            import { Component, Injectable, NgModule } from '@angular/core';

            @Component({
              selector: 'app-root',
              templateUrl: './app.component.html',
            })
            export class AppComponent {}

            @Injectable({ providedIn: 'root' })
            export class DataService {}

            @NgModule({
              declarations: [AppComponent],
            })
            export class AppModule {}

            export interface User {
              id: number;
            }
            """
        )
    )

    kinds = [(element.name, element.kind) for element in structure.elements]
    assert kinds == [
        ("AppComponent", ElementKind.COMPONENT),
        ("DataService", ElementKind.SERVICE),
        ("AppModule", ElementKind.MODULE),
        ("User", ElementKind.INTERFACE),
    ]
    component = structure.elements[0]
    assert component.line == 7
    assert component.metadata is not None
    assert component.metadata.annotations == ("@Component",)


def test_returns_jsx_respects_lookahead_window() -> None:
    lines = ["function Late() {"] + ["  step();"] * 25 + ["  return <div />;", "}"]

    assert returns_jsx(lines, 0) is False
    assert returns_jsx(["function A() {", "  return <A />;"], 0) is True
