"""Tests for the Drupal-aware PHP structural extractor."""

from __future__ import annotations

import textwrap

from ctxscan.models import ElementKind
from ctxscan.parsers.php import (
    analyze_php,
    canonical_hook_name,
    has_drupal_signature,
    hook_from_function_name,
    is_drupal_file,
)


def _src(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_block_plugin_detected_from_annotation() -> None:
    structure = analyze_php(
        _src(
            """
            <?php

            namespace Drupal\\hello\\Plugin\\Block;

            use Drupal\\Core\\Block\\BlockBase;

            /**
             * Provides a greeting block.
             *
             * @Block(
             *   id = "hello_block",
             *   admin_label = @Translation("Hello"),
             * )
             */
            class HelloBlock extends BlockBase {

              public function build() {
                return [];
              }

            }
            """
        )
    )

    assert structure.is_drupal is True
    namespace, block, build = structure.elements
    assert namespace.kind == ElementKind.MODULE
    assert namespace.name == "Drupal\\hello\\Plugin\\Block"

    assert block.kind == ElementKind.PLUGIN
    assert block.description == "Provides a greeting block."
    assert block.metadata is not None
    assert block.metadata.is_plugin is True
    assert block.metadata.plugin_type == "Block"
    assert block.metadata.namespace == "Drupal\\hello\\Plugin\\Block"

    assert build.kind == ElementKind.METHOD
    assert build.name == "build"


def test_plugin_detected_from_base_class_lookahead() -> None:
    structure = analyze_php(
        _src(
            """
            <?php
            namespace Drupal\\demo\\Worker;

            final class Mailer
              extends QueueWorkerBase
              implements ContainerFactoryPluginInterface {
            }
            """
        )
    )

    mailer = structure.elements[1]
    assert mailer.kind == ElementKind.PLUGIN
    assert mailer.metadata is not None
    assert mailer.metadata.plugin_type == "QueueWorker"


def test_event_subscriber_is_a_tagged_service() -> None:
    structure = analyze_php(
        _src(
            """
            <?php
            namespace Drupal\\demo\\EventSubscriber;

            class RedirectSubscriber implements EventSubscriberInterface {
            }
            """
        )
    )

    subscriber = structure.elements[1]
    assert subscriber.kind == ElementKind.SERVICE
    assert subscriber.metadata is not None
    assert subscriber.metadata.service_tags == ("event_subscriber",)


def test_hooks_resolved_from_names_and_docblocks() -> None:
    structure = analyze_php(
        _src(
            """
            <?php

            /**
             * Implements hook_form_alter().
             */
            function demo_form_alter(&$form, $form_state, $form_id) {
            }

            function demo_hook_cron() {
            }

            /**
             * @Implements hook_theme
             */
            function demo_theme_registry() {
            }

            function demo_helper() {
            }
            """
        ),
        "modules/custom/demo/demo.module",
    )

    hooks = {
        element.name: element.metadata.hook_name
        for element in structure.of_kind(ElementKind.HOOK)
        if element.metadata is not None
    }
    assert hooks == {
        "demo_form_alter": "hook_form_alter",
        "demo_hook_cron": "hook_cron",
        "demo_theme_registry": "hook_theme",
    }
    helper = structure.of_kind(ElementKind.FUNCTION)[0]
    assert helper.name == "demo_helper"
    assert structure.is_drupal is True


def test_plain_php_class_is_generic() -> None:
    structure = analyze_php("<?php\nclass Cart {\n  public function total() {}\n}\nfunction helper() {}\n")

    kinds = [(element.name, element.kind) for element in structure.elements]
    assert kinds == [
        ("Cart", ElementKind.CLASS),
        ("total", ElementKind.METHOD),
        ("helper", ElementKind.FUNCTION),
    ]
    assert structure.is_drupal is False


def test_drupal_signature_helpers() -> None:
    assert has_drupal_signature("<?php\nuse Drupal\\Core\\Form\\FormBase;\n")
    assert has_drupal_signature("<?php\nfunction foo_hook_cron() {}\n")
    assert not has_drupal_signature("<?php\necho 'hello';\n")
    assert is_drupal_file("web/modules/custom/foo/src/Thing.php", "<?php\n")
    assert is_drupal_file("foo.install", "<?php\n")


def test_hook_name_normalisation() -> None:
    assert canonical_hook_name("hook_cron().") == "hook_cron"
    assert canonical_hook_name("cron") == "hook_cron"
    assert canonical_hook_name("") is None
    assert hook_from_function_name("mymodule_hook_node_insert") == "hook_node_insert"
    assert hook_from_function_name("mymodule_install") is None
