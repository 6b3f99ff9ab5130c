"""Shared fixtures for modgraph tests."""

import json
import os
import textwrap

import pytest

from modgraph.core.parser import parse_source


SAMPLE_FUNCTION_COMPONENT = textwrap.dedent("""\
    import React, { useState, useEffect } from "react";

    export function SampleFunctionComponent({
      name,
      otherName,
    }: {
      name: string;
      otherName: string;
    }) {
      const [count, setCount] = useState(0);
      const [test] = useState(0);

      const testFunction = ({
        internalTestProp,
      }: {
        internalTestProp: boolean;
      }) => {
        return test;
      };

      useEffect(() => {
        console.log("useEffect");
      }, []);

      return (
        <>
          <div className="text-red-500">{name}</div>
        </>
      );
    }
""")

SAMPLE_ARROW_COMPONENT = textwrap.dedent("""\
    import React, { useState } from "react";

    export const SampleArrowComponent = ({ lastName }: { lastName: string }) => {
      const [name, setName] = useState("SampleFunctionComponent");
      return (
        <div>
          {name}
          {lastName}
        </div>
      );
    };
""")


def parse_tsx(code: str):
    """Parse TSX source and return the root node."""
    return parse_source(textwrap.dedent(code), "tsx").root_node


def write_files(root, files: dict) -> dict:
    """
    Write {relative_path: content} under root.

    Returns:
        {relative_path: absolute_path}
    """
    paths = {}
    for rel_path, content in files.items():
        full_path = os.path.join(str(root), rel_path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "w", encoding="utf8") as f:
            f.write(textwrap.dedent(content))
        paths[rel_path] = full_path
    return paths


@pytest.fixture
def make_repo(tmp_path):
    """Factory writing a repository with a tsconfig.json at its root."""
    def _make(files: dict, tsconfig: dict = None):
        write_files(tmp_path, files)
        tsconfig_path = tmp_path / "tsconfig.json"
        tsconfig_path.write_text(json.dumps(tsconfig or {"compilerOptions": {"jsx": "react"}}))
        return str(tmp_path), str(tsconfig_path)
    return _make


@pytest.fixture
def sample_repo(make_repo):
    return make_repo({
        "src/SampleFunctionComponent.tsx": SAMPLE_FUNCTION_COMPONENT,
        "src/SampleArrowComponent.tsx": SAMPLE_ARROW_COMPONENT,
    })
