"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from depscop.config import Config
from depscop.model import DependencyGraph, Node

SDK_PROJECT = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>
{items}</Project>
"""


def write_csproj(path: Path, references: list[str] | None = None, bom: bool = False) -> Path:
    """Write an SDK-style project file referencing *references*."""
    items = ""
    if references:
        refs = "".join(f'    <ProjectReference Include="{r}" />\n' for r in references)
        items = f"  <ItemGroup>\n{refs}  </ItemGroup>\n"
    text = SDK_PROJECT.format(items=items)
    if bom:
        text = "\ufeff" + text
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def make_graph(names: list[str], edges: list[tuple[str, str]]) -> DependencyGraph:
    """Build a graph of plain nodes from name pairs."""
    graph = DependencyGraph()
    for name in names:
        graph.intern_node(Node(id=name, name=name, node_type="project"))
    for src, dst in edges:
        graph.add_edge(graph.index_of(src), graph.index_of(dst), True, f"{src} -> {dst}")
    return graph


@pytest.fixture
def config():
    """The built-in default configuration."""
    return Config.default()


@pytest.fixture
def layered_solution(tmp_path):
    """Three projects: Entities (core), IO (io) and UseCases (usecase)."""
    write_csproj(tmp_path / "Foo.Entities" / "Foo.Entities.csproj")
    write_csproj(
        tmp_path / "Bar.IO" / "Bar.IO.csproj",
        ["..\\Foo.Entities\\Foo.Entities.csproj"],
    )
    write_csproj(
        tmp_path / "Baz.UseCases" / "Baz.UseCases.csproj",
        ["../Bar.IO/Bar.IO.csproj", "..\\Foo.Entities\\Foo.Entities.csproj"],
    )
    return tmp_path


@pytest.fixture
def namespace_sources(tmp_path):
    """C# files declaring and using layered namespaces."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "Order.cs").write_text(
        "using System;\n"
        "\n"
        "namespace Shop.Entities\n"
        "{\n"
        "    public class Order { }\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "OrderRepository.cs").write_text(
        "namespace Shop.IO\n"
        "{\n"
        "    using System;\n"
        "    using Shop.Entities;\n"
        "\n"
        "    public class OrderRepository { }\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "PlaceOrder.cs").write_text(
        "namespace Shop.UseCases;\n"
        "\n"
        "using Shop.Entities;\n"
        "using Shop.IO;\n"
        "using Shop.Entities;\n"
        "\n"
        "public class PlaceOrder { }\n",
        encoding="utf-8",
    )
    return tmp_path
