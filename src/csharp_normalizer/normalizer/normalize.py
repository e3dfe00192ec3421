"""
Normalize Pass.

Converts the preprocessed native tree to canonical semantic nodes:

1. trivia is hoisted out of nodes into ``uast:Group`` wrappers;
2. the semantic rules in :data:`NORMALIZERS` rewrite identifiers, literals,
   comments, imports, qualified names, parameters and function declarations;
3. Groups are merged into the function groups they wrap;
4. duplicate roles are collapsed.
"""

from typing import List, Mapping as MappingType

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.normalizer.comments import CommentNode, CommentText
from csharp_normalizer.normalizer.operators import ArrHasKeyword, ArrToChain, MergeGroups, MoveTrivias
from csharp_normalizer.transformer.interface import Transformer
from csharp_normalizer.transformer.mapping import Map, MapObj, MapSemantic, Mapping
from csharp_normalizer.transformer.objects import CasesObj, Field, Fields, Has, Obj, UASTType
from csharp_normalizer.transformer.ops import Any, Append, Arr, Bool, Check, Int, Is, String, Var
from csharp_normalizer.transformer.pipeline import Transformers
from csharp_normalizer.transformer.predicates import HasType
from csharp_normalizer.transformer.transformers import Mappings, RolesDedup
from csharp_normalizer.uast import schema
from csharp_normalizer.uast.nodes import KEY_POS, KEY_TOKEN, KEY_TYPE


def move_trivias(fields: MappingType[str, str]) -> Mapping:
  return Map(
    MoveTrivias(Var("node"), fields),
    Var("node"),
    name="move trivias",
  )


def merge_groups() -> Mapping:
  return Map(
    MergeGroups(Var("group")),
    Var("group"),
    name="merge groups",
  )


def _token(typ: str, text: str, value) -> Fields:
  return Obj(
    {
      KEY_TYPE: String(typ),
      "Text": String(text),
      "Value": Is(value),
      "ValueText": String(text),
      "IsMissing": Bool(False),
    }
  )


def _bool_literal(native_type: str, keyword: str, value: bool) -> Mapping:
  return MapSemantic(
    native_type,
    schema.Bool,
    MapObj(
      Obj(
        {
          "Token": _token(keyword, "true" if value else "false", value),
          "IsMissing": Bool(False),
          "IsStructuredTrivia": Bool(False),
        }
      ),
      Obj({"Value": Bool(value)}),
    ),
  )


def _comment(native_type: str, start: str, end: str, block: bool) -> Mapping:
  return MapSemantic(
    native_type,
    schema.Comment,
    MapObj(
      Obj({KEY_TOKEN: CommentText(start, end, "text"), "IsDirective": Bool(False)}),
      CommentNode(block, "text"),
    ),
  )


def func_def_map(typ: str) -> Mapping:
  """Maps a method-like declaration to a ``uast:FunctionGroup``."""
  return MapSemantic(
    typ,
    schema.FunctionGroup,
    MapObj(
      Fields(
        [
          Field("Body", Var("body")),
          Field("Identifier", Var("name")),
          Field(
            "ParameterList",
            Obj(
              {
                KEY_TYPE: String("ParameterList"),
                "IsMissing": Bool(False),
                "IsStructuredTrivia": Bool(False),
                "Parameters": Var("params"),
              }
            ),
          ),
          Field("ReturnType", Var("rettype"), optional="opt_return"),
        ]
      ),
      Obj(
        {
          "Nodes": Arr(
            UASTType(
              schema.Alias,
              Obj(
                {
                  "Name": Var("name"),
                  "Node": UASTType(
                    schema.Function,
                    Obj(
                      {
                        "Body": Var("body"),
                        "Type": UASTType(
                          schema.FunctionType,
                          Fields(
                            [
                              Field("Arguments", Var("params")),
                              Field(
                                "Returns",
                                Arr(UASTType(schema.Argument, Obj({"Type": Var("rettype")}))),
                                optional="opt_return",
                              ),
                            ]
                          ),
                        ),
                      }
                    ),
                  ),
                }
              ),
            )
          )
        }
      ),
    ),
  )


NORMALIZERS: List[Mapping] = [
  # empty identifier tokens carry nothing useful
  Map(
    Check(Has({KEY_TYPE: "IdentifierToken", "Text": "", "Value": "", "ValueText": ""}), Any()),
    Is(None),
    name="remove empty identifier tokens",
  ),
  MapSemantic(
    "IdentifierToken",
    schema.Identifier,
    MapObj(
      Obj(
        {
          "IsMissing": Bool(False),
          # Text keeps the @ of verbatim identifiers (@for), Value does not
          "Text": Any(),
          "Value": Var("name"),
          "ValueText": Var("name"),
        }
      ),
      Obj({"Name": Var("name")}),
    ),
  ),
  Map(
    Check(Has({KEY_TYPE: "IdentifierName", "Identifier": None}), Any()),
    Is(None),
    name="remove empty identifiers",
  ),
  Map(
    Obj(
      {
        KEY_TYPE: String("IdentifierName"),
        "Identifier": Var("ident"),
        "Arity": Int(0),
        "IsMissing": Bool(False),
        "IsStructuredTrivia": Bool(False),
      }
    ),
    Var("ident"),
    name="IdentifierName -> identifier",
  ),
  # a keyword used as a parameter name
  MapSemantic(
    "ArgListKeyword",
    schema.Identifier,
    MapObj(
      Obj(
        {
          "IsMissing": Bool(False),
          "Text": String("__arglist"),
          "Value": String("__arglist"),
          "ValueText": String("__arglist"),
        }
      ),
      Obj({"Name": String("__arglist")}),
    ),
  ),
  MapSemantic(
    "StringLiteralExpression",
    schema.String,
    MapObj(
      Obj(
        {
          "Token": Obj(
            {
              KEY_TYPE: String("StringLiteralToken"),
              "IsMissing": Bool(False),
              # escaped form of the value
              "Text": Any(),
              "Value": Var("val"),
              "ValueText": Var("val"),
            }
          ),
          "IsMissing": Bool(False),
          "IsStructuredTrivia": Bool(False),
        }
      ),
      Obj({"Value": Var("val")}),
    ),
  ),
  # literal part of an interpolated string, its trivia was hoisted already
  MapSemantic(
    "InterpolatedStringTextToken",
    schema.String,
    MapObj(
      Obj(
        {
          "IsMissing": Bool(False),
          "Text": Any(),
          "Value": Var("val"),
          "ValueText": Var("val"),
        }
      ),
      Obj({"Value": Var("val")}),
    ),
  ),
  MapSemantic(
    "InterpolatedStringText",
    schema.String,
    MapObj(
      Obj(
        {
          "TextToken": Obj(
            {
              KEY_TYPE: String(schema.String.TYPE),
              "Format": String(""),
              "Value": Var("val"),
            }
          ),
          "IsMissing": Bool(False),
          "IsStructuredTrivia": Bool(False),
        }
      ),
      Obj({"Value": Var("val")}),
    ),
  ),
  _bool_literal("TrueLiteralExpression", "TrueKeyword", True),
  _bool_literal("FalseLiteralExpression", "FalseKeyword", False),
  MapSemantic(
    "Block",
    schema.Block,
    MapObj(
      Obj({"Statements": Var("stmts"), "OpenBraceToken": Any(), "CloseBraceToken": Any()}),
      Obj({"Statements": Var("stmts")}),
    ),
  ),
  _comment("SingleLineCommentTrivia", "//", "", block=False),
  _comment("MultiLineCommentTrivia", "/*", "*/", block=True),
  _comment("SingleLineDocumentationCommentTrivia", "///", "", block=False),
  # C# imports every symbol of the namespace
  MapSemantic(
    "UsingDirective",
    schema.Import,
    MapObj(
      Obj({"Name": Var("path"), "SemicolonToken": Any(), "UsingKeyword": Any()}),
      Obj({"Path": Var("path"), "All": Bool(True)}),
    ),
  ),
  # A.B.C is parsed as QualifiedName{Left: QualifiedName{Left: A, Right: B}, Right: C}.
  # Children are rewritten first, so Left is either an identifier or an
  # already flattened QualifiedIdentifier.
  MapSemantic(
    "QualifiedName",
    schema.QualifiedIdentifier,
    MapObj(
      CasesObj(
        "case",
        Obj({"Right": Var("right")}),
        [
          Obj({"Left": Check(HasType(schema.Identifier.TYPE), Var("left"))}),
          Obj(
            {
              "Left": UASTType(
                schema.QualifiedIdentifier,
                Fields([Field(KEY_POS, Any(), optional="left_pos"), Field("Names", Var("names"))]),
              )
            }
          ),
        ],
      ),
      CasesObj(
        "case",
        None,
        [
          Obj({"Names": Arr(Var("left"), Var("right"))}),
          Obj({"Names": Append(Var("names"), Arr(Var("right")))}),
        ],
      ),
    ),
  ),
  # old style variadic argument: a parameter named __arglist
  MapSemantic(
    "Parameter",
    schema.Argument,
    MapObj(
      Obj(
        {
          "Identifier": Check(
            Has({KEY_TYPE: schema.Identifier.TYPE, "Name": "__arglist"}),
            Var("name"),
          ),
          "AttributeLists": Arr(),
          "Default": Var("def_init"),
          "IsMissing": Bool(False),
          "IsStructuredTrivia": Bool(False),
          "Modifiers": Arr(),
          "Type": Var("type"),
        }
      ),
      Obj(
        {
          "Name": Var("name"),
          "Type": Var("type"),
          "Init": Var("def_init"),
          "Variadic": Bool(True),
          "MapVariadic": Bool(False),
          "Receiver": Bool(False),
        }
      ),
    ),
  ),
  # params and this modifiers become flags, remaining modifiers wrap the type
  MapSemantic(
    "Parameter",
    schema.Argument,
    MapObj(
      Obj(
        {
          "Identifier": Check(Has({KEY_TYPE: schema.Identifier.TYPE}), Var("name")),
          "AttributeLists": Arr(),
          "Default": Var("def_init"),
          "IsMissing": Bool(False),
          "Modifiers": ArrHasKeyword(
            "ParamsKeyword",
            Var("variadic"),
            ArrHasKeyword("ThisKeyword", Var("this"), Var("rest")),
          ),
          "Type": Var("type"),
        }
      ),
      Obj(
        {
          "Name": Var("name"),
          "Type": ArrToChain(Var("rest"), Var("type")),
          "Init": Var("def_init"),
          "Variadic": Var("variadic"),
          "MapVariadic": Bool(False),
          "Receiver": Var("this"),
        }
      ),
    ),
  ),
  func_def_map("MethodDeclaration"),
  func_def_map("ConstructorDeclaration"),
  func_def_map("DestructorDeclaration"),
]


def normalizers(config: RuntimeConfig) -> List[Transformer]:
  """Returns the Normalize stages, in order."""
  return [
    Mappings(move_trivias(config.trivia_fields), name="move trivias"),
    Mappings(*NORMALIZERS, name="semantic"),
    Mappings(merge_groups(), name="merge groups"),
    RolesDedup(),
  ]


def build_normalize(config: RuntimeConfig) -> Transformers:
  return Transformers("normalize", normalizers(config))
