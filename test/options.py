# python
"""
Options module behavioral tests (descriptors and compilation).

Scope
- Validate Option construction: trigger rules, target derivation, type resolution,
  read-only copies and copy.replace() support.
- Validate descriptor mappings (Option.from_mapping).
- Validate compile(): precedence sorting, isolation from the caller's descriptors,
  aliasing, duplicate-trigger diagnostics and the per-target index.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
import warnings
from unittest import TestCase

from optline import Option, CompiledOptions, compile, ValueType, DuplicateTriggerWarning, FaultCode
from optline.utils import Unset


class TestOption(TestCase):
    """Behavioral tests for Option descriptors."""

    def testOptionRequiresAtLeastOneTrigger(self):
        with self.assertRaises(TypeError):
            Option()

    def testOptionTriggersMustBeStrings(self):
        with self.assertRaises(TypeError):
            Option("-x", 5)

    def testOptionEmptyTriggerRejected(self):
        with self.assertRaises(ValueError):
            Option("")

    def testOptionTriggerWithEqualsRejected(self):
        with self.assertRaises(ValueError):
            Option("--a=b")

    def testOptionRepeatedTriggersKept(self):
        self.assertEqual(Option("--dup", "--dup").triggers, ["--dup", "--dup"])

    def testOptionTargetDerivedFromLongestTrigger(self):
        self.assertEqual(Option("-o", "--output").target, "output")

    def testOptionTargetTieKeepsFirstTrigger(self):
        self.assertEqual(Option("--ab", "--cd").target, "ab")

    def testOptionExplicitTarget(self):
        self.assertEqual(Option("-p", target="server.port").target, "server.port")

    def testOptionBlankTargetFallsBackToDerived(self):
        for target in ("", "  "):
            with self.subTest(target=target):
                o = Option("-n", "--name", target=target)
                self.assertEqual(o.target, "name")

    def testOptionTypeDefaultsToString(self):
        self.assertEqual(Option("--name").type, [ValueType.STRING])

    def testOptionTypeKeepsDeclaredOrder(self):
        self.assertEqual(Option("-x", type=["string", "integer"]).type, [ValueType.STRING, ValueType.INTEGER])

    def testOptionTypeNamesAreCaseInsensitive(self):
        self.assertEqual(Option("-x", type="Boolean").type, [ValueType.BOOLEAN])

    def testOptionUnknownTypeRejected(self):
        with self.assertRaises(ValueError):
            Option("-x", type="decimal")

    def testOptionEmptyTypeListRejected(self):
        with self.assertRaises(ValueError):
            Option("-x", type=[])

    def testOptionMapMustBeMapping(self):
        with self.assertRaises(TypeError):
            Option("--mode", map=["fast", "safe"])

    def testOptionMapKeysMustBeStrings(self):
        with self.assertRaises(TypeError):
            Option("--level", map={1: "one"})

    def testOptionBlankDescriptionIsUnset(self):
        self.assertIs(Option("--name", description="   ").description, Unset)

    def testOptionAbsentFieldsAreUnset(self):
        o = Option("--name")
        self.assertIs(o.default, Unset)
        self.assertIs(o.map, Unset)
        self.assertIs(o.description, Unset)
        self.assertFalse(o.array)

    def testOptionNoneDefaultIsKept(self):
        self.assertIsNone(Option("--name", default=None).default)

    def testOptionPropertiesKeepContainerTypes(self):
        o = Option("--pair", map={"a": (1, 2)}, default=(1, 2))
        self.assertEqual(o.default, (1, 2))
        self.assertEqual(o.map, {"a": (1, 2)})

    def testOptionPropertiesHandOutCopies(self):
        o = Option("--mode", map={"fast": {"value": 1}}, default=[1, 2])
        o.triggers.append("--other")
        o.map["slow"] = 2
        o.map["fast"]["value"] = 99
        o.default.append(3)
        self.assertEqual(o.triggers, ["--mode"])
        self.assertEqual(o.map, {"fast": {"value": 1}})
        self.assertEqual(o.default, [1, 2])

    def testOptionPropertiesAreReadOnly(self):
        o = Option("--name")
        with self.assertRaises(AttributeError):
            o.array = True

    def testOptionReplace(self):
        o = Option("-l", "--level", type="integer", default=3)
        r = copy.replace(o, type=["string", "integer"])
        self.assertEqual(r.type, [ValueType.STRING, ValueType.INTEGER])
        self.assertEqual(r.triggers, ["-l", "--level"])
        self.assertEqual(r.default, 3)
        self.assertEqual(o.type, [ValueType.INTEGER])

    def testOptionRepr(self):
        self.assertTrue(repr(Option("-v", type="none")).startswith("option(triggers=['-v']"))


class TestFromMapping(TestCase):
    """Behavioral tests for the plain descriptor shape."""

    def testFromMappingFields(self):
        o = Option.from_mapping({
            "triggers": ["-t", "--tag"],
            "type": "string",
            "isArray": True,
            "target": "meta.tags",
            "description": "tags to apply",
        })
        self.assertEqual(o.triggers, ["-t", "--tag"])
        self.assertTrue(o.array)
        self.assertEqual(o.target, "meta.tags")
        self.assertEqual(o.description, "tags to apply")

    def testFromMappingRequiresTriggers(self):
        with self.assertRaises(TypeError):
            Option.from_mapping({"type": "string"})

    def testFromMappingIgnoresUnknownKeys(self):
        o = Option.from_mapping({"triggers": ["-x"], "nargs": 2, "help": "extra"})
        self.assertEqual(o.triggers, ["-x"])
        self.assertEqual(o.target, "x")

    def testFromMappingRejectsStringTriggers(self):
        with self.assertRaises(TypeError):
            Option.from_mapping({"triggers": "-x"})


class TestCompile(TestCase):
    """Behavioral tests for compile()."""

    def testCompileReturnsCompiledOptions(self):
        compiled = compile([Option("-v", "--verbose", type="none")])
        self.assertIsInstance(compiled, CompiledOptions)
        self.assertEqual(sorted(compiled), ["--verbose", "-v"])
        self.assertEqual(len(compiled), 2)

    def testCompileSortsTypesByPrecedence(self):
        compiled = compile([Option("-x", type=["string", "json", "integer", "none", "boolean", "float"])])
        self.assertEqual(compiled["-x"].type, [
            ValueType.NONE,
            ValueType.FLOAT,
            ValueType.INTEGER,
            ValueType.BOOLEAN,
            ValueType.JSON,
            ValueType.STRING,
        ])

    def testCompileWrapsSingleType(self):
        compiled = compile([{"triggers": ["--level"], "type": "integer"}])
        self.assertEqual(compiled["--level"].type, [ValueType.INTEGER])

    def testCompileLeavesCallerDescriptorUntouched(self):
        descriptor = {"triggers": ["-x"], "type": ["string", "integer"], "map": {"a": ["A"]}}
        compiled = compile([descriptor])
        self.assertEqual(descriptor["type"], ["string", "integer"])
        descriptor["map"]["b"] = "B"
        descriptor["map"]["a"].append("Z")
        self.assertEqual(compiled["-x"].map, {"a": ["A"]})

    def testCompileLeavesCallerOptionUntouched(self):
        option = Option("-x", type=["string", "integer"])
        compiled = compile([option])
        self.assertEqual(option.type, [ValueType.STRING, ValueType.INTEGER])
        self.assertIsNot(compiled["-x"], option)

    def testCompileIsIdempotent(self):
        descriptors = [
            {"triggers": ["-a", "--alpha"], "type": ["string", "float"]},
            {"triggers": ["-b"], "type": "boolean"},
        ]
        first = compile(descriptors)
        second = compile(descriptors)
        self.assertEqual(set(first), set(second))
        for name in first:
            self.assertEqual(first[name].type, second[name].type)

    def testCompileAliasesShareOption(self):
        compiled = compile([Option("-v", "--verbose", type="none")])
        self.assertIs(compiled["-v"], compiled["--verbose"])

    def testCompileDuplicateTriggerGoesToDiagnostics(self):
        received = []
        compiled = compile([
            Option("-x", "--ex", type="string"),
            Option("-x", "--extra", type="integer"),
        ], diagnostics=received.append)
        self.assertEqual(len(received), 1)
        self.assertIsInstance(received[0], DuplicateTriggerWarning)
        self.assertEqual(received[0].options["trigger"], "-x")
        self.assertIs(received[0].options["code"], FaultCode.DUPLICATE_TRIGGER)
        self.assertEqual(compiled["-x"].target, "extra")
        self.assertEqual(compiled["--ex"].target, "ex")
        self.assertEqual(compiled.warnings, tuple(received))

    def testCompileRepeatedTriggerInsideOneDescriptor(self):
        received = []
        compiled = compile([{"triggers": ["-x", "-x"], "type": "string"}], diagnostics=received.append)
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].options["trigger"], "-x")
        self.assertEqual(list(compiled), ["-x"])
        self.assertEqual(compiled["-x"].target, "x")

    def testCompileToleratesLooseDescriptors(self):
        compiled = compile([{"triggers": ["--name"], "target": "", "description": "", "hidden": True}])
        self.assertEqual(compiled["--name"].target, "name")
        self.assertIs(compiled["--name"].description, Unset)

    def testCompileDuplicateTriggerWarnsByDefault(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            compiled = compile([Option("-x"), Option("-x", target="other")])
        self.assertTrue(any(issubclass(w.category, DuplicateTriggerWarning) for w in caught))
        self.assertEqual(compiled["-x"].target, "other")

    def testCompileDuplicateTriggerIsLogged(self):
        with self.assertLogs("optline.options", "WARNING") as captured:
            compile([Option("-x"), Option("-x")], diagnostics=lambda warning: None)
        self.assertTrue(any("-x" in line for line in captured.output))

    def testCompileTargetsIndex(self):
        compiled = compile([
            Option("-v", "--verbose", type="none"),
            Option("-q", target="verbose", type="none"),
            Option("--level", type="integer", default=3),
        ])
        self.assertEqual(list(compiled.targets), ["verbose", "level"])
        self.assertEqual(compiled.targets["verbose"].triggers, ["-v", "--verbose"])

    def testCompileRejectsBadItems(self):
        with self.assertRaises(TypeError):
            compile(["-x"])

    def testCompileRejectsStringArgument(self):
        with self.assertRaises(TypeError):
            compile("-x")

    def testCompileRejectsNonCallableDiagnostics(self):
        with self.assertRaises(TypeError):
            compile([Option("-x")], diagnostics="stderr")

    def testCompiledOptionsAreReadOnly(self):
        compiled = compile([Option("-x")])
        with self.assertRaises(TypeError):
            compiled["-y"] = Option("-y")  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
