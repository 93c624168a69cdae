"""Library Catalogue — SHACL shapes and JSON-LD context.

Two node shapes describe the catalogue:
- AuthorShape: name (required), born (optional year)
- BookShape: title, isbn, pages, genre and the authors who wrote it

The JSON-LD context renames lib:author to ``writtenBy`` for the generated
property names.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from rdflib import Graph

from ontogen import OntologyModel, parse_context, parse_shapes

LIB = "http://example.org/library/"

SHAPES_TTL = """
@prefix sh:  <http://www.w3.org/ns/shacl#> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .
@prefix lib: <http://example.org/library/> .

lib:AuthorShape a sh:NodeShape ;
    sh:targetClass lib:Author ;
    sh:property [
        sh:path lib:name ;
        sh:datatype xsd:string ;
        sh:minCount 1 ;
        sh:maxCount 1 ;
        sh:minLength 1 ;
        sh:description "Name as printed on the title page." ;
        sh:order 0 ;
    ] ;
    sh:property [
        sh:path lib:born ;
        sh:datatype xsd:integer ;
        sh:maxCount 1 ;
        sh:maxInclusive 2100 ;
        sh:order 1 ;
    ] .

lib:BookShape a sh:NodeShape ;
    sh:targetClass lib:Book ;
    sh:property [
        sh:path lib:title ;
        sh:datatype xsd:string ;
        sh:minCount 1 ;
        sh:maxCount 1 ;
        sh:order 0 ;
    ] ;
    sh:property [
        sh:path lib:isbn ;
        sh:datatype xsd:string ;
        sh:maxCount 1 ;
        sh:pattern "^[0-9][0-9-]{8,15}[0-9Xx]$" ;
        sh:order 1 ;
    ] ;
    sh:property [
        sh:path lib:pages ;
        sh:datatype xsd:integer ;
        sh:maxCount 1 ;
        sh:minInclusive 1 ;
        sh:order 2 ;
    ] ;
    sh:property [
        sh:path lib:genre ;
        sh:datatype xsd:string ;
        sh:maxCount 1 ;
        sh:in ( "fiction" "poetry" "reference" ) ;
        sh:order 3 ;
    ] ;
    sh:property [
        sh:path lib:author ;
        sh:class lib:Author ;
        sh:minCount 1 ;
        sh:order 4 ;
    ] .
"""

CONTEXT = {
    "@context": {
        "lib": LIB,
        "xsd": "http://www.w3.org/2001/XMLSchema#",
        "Author": "lib:Author",
        "Book": "lib:Book",
        "writtenBy": {"@id": "lib:author", "@type": "@id", "@container": "@set"},
        "pages": {"@id": "lib:pages", "@type": "xsd:integer"},
    }
}


def build_shapes_graph() -> Graph:
    graph = Graph()
    graph.parse(data=SHAPES_TTL, format="turtle")
    return graph


def build_model() -> OntologyModel:
    """Shapes plus JSON-LD context for the catalogue."""
    return OntologyModel(
        shapes=parse_shapes(build_shapes_graph()),
        context=parse_context(CONTEXT),
    )
