from __future__ import annotations

import unittest
import xml.etree.ElementTree as ET

from cargowix.errors import GenericError
from cargowix.templates import Template


WIX_XMLNS = "{http://schemas.microsoft.com/wix/2006/wi}"


class TemplateRegistryTests(unittest.TestCase):
    def test_possible_values_lists_both_spellings(self) -> None:
        values = Template.possible_values()
        for expected in ("Apache-2.0", "apache-2.0", "GPL-3.0", "gpl-3.0", "MIT", "mit", "WXS", "wxs"):
            self.assertIn(expected, values)
        self.assertEqual(len(values), 8)

    def test_from_str_is_case_insensitive(self) -> None:
        self.assertIs(Template.from_str("mit"), Template.MIT)
        self.assertIs(Template.from_str("Apache-2.0"), Template.APACHE2)
        self.assertIs(Template.from_str("wxs"), Template.WXS)

    def test_unknown_id_is_generic_error(self) -> None:
        with self.assertRaises(GenericError):
            Template.from_str("BSD-3-Clause")

    def test_find_license_ignores_wxs_and_unknown_ids(self) -> None:
        self.assertIs(Template.find_license("gpl-3.0"), Template.GPL3)
        self.assertIsNone(Template.find_license("WXS"))
        self.assertIsNone(Template.find_license("MIT OR Apache-2.0"))
        self.assertIsNone(Template.find_license(None))

    def test_license_templates_render_copyright(self) -> None:
        for template in (Template.MIT, Template.APACHE2, Template.GPL3):
            with self.subTest(template=template.id):
                text = template.render({"copyright-year": "2024", "copyright-holder": "A & B"})
                self.assertTrue(text.startswith("{\\rtf1"))
                self.assertIn("2024 A & B", text)

    def test_wxs_template_is_well_formed_xml(self) -> None:
        text = Template.WXS.render(
            {
                "product-name": "Example",
                "manufacturer": "Jane Doe",
                "upgrade-code-guid": "11111111-2222-3333-4444-555555555555",
                "path-component-guid": "66666666-7777-8888-9999-000000000000",
                "binaries": [
                    {"binary-index": 0, "binary-name": "example", "binary-source": "$(var.CargoTargetBinDir)/example.exe"},
                ],
                "description": "An example",
                "help-url": "https://example.com",
                "license-source": "wix/License.rtf",
                "license-name": "License.rtf",
                "eula": "wix/License.rtf",
            }
        )
        root = ET.fromstring(text.encode("windows-1252"))
        product = root.find(f"{WIX_XMLNS}Product")
        self.assertIsNotNone(product)
        self.assertEqual(product.get("UpgradeCode"), "11111111-2222-3333-4444-555555555555")
        files = {element.get("Id"): element for element in root.iter(f"{WIX_XMLNS}File")}
        self.assertEqual(files["exe0"].get("Source"), "$(var.CargoTargetBinDir)/example.exe")
        self.assertEqual(files["LicenseFile"].get("Name"), "License.rtf")
        variables = {element.get("Id"): element.get("Value") for element in root.iter(f"{WIX_XMLNS}WixVariable")}
        self.assertEqual(variables, {"WixUILicenseRtf": "wix/License.rtf"})

    def test_wxs_template_without_optional_values(self) -> None:
        text = Template.WXS.render(
            {
                "product-name": "Example",
                "manufacturer": "Jane Doe",
                "upgrade-code-guid": "11111111-2222-3333-4444-555555555555",
                "path-component-guid": "66666666-7777-8888-9999-000000000000",
                "binaries": [],
            }
        )
        root = ET.fromstring(text.encode("windows-1252"))
        self.assertEqual(list(root.iter(f"{WIX_XMLNS}WixVariable")), [])
        self.assertNotIn("LicenseFile", text)
        self.assertNotIn("ARPHELPLINK", text)
        self.assertIn("CustomizeDlg", text)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
