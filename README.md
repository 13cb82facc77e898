# mobilegen

Building blocks for generating Xcode projects for Rust-based iOS and macOS
apps. The package works on the text that Apple's tools print and on the
files you hand it; it never starts any program itself.

## What is inside

- `mobilegen.version_number`: parse and print bundle version numbers such
  as `1.2.3` or `1.2.3.4.5` (`parse_version_triple`, `parse_version_number`,
  `VersionNumber.push_extra`). Bad input raises `VersionNumberError`.
- `mobilegen.target`: the table of Apple targets (`all_targets`,
  `target_names`, `for_arch`, `macos_target`), `Target.check_xcode_version`,
  which raises `XcodeVersionTooLow` when the installed Xcode is too old, and
  `verbosity` for the `xcodebuild` quiet flag.
- `mobilegen.system_profile`: read the Xcode version out of
  `system_profiler SPDeveloperToolsDataType` output (`parse_developer_tools`).
  Empty output raises `XcodeNotInstalled`; output without a version line
  raises `VersionSearchFailed`.
- `mobilegen.teams`: find development teams in signing certificates given
  as PEM data (`teams_from_pem`, `team_from_x509`, `get_x509_field`). Teams
  come back sorted and without duplicates; certificates that lack a common
  name or organizational unit are logged and skipped.
- `mobilegen.device`: the `Device` record (`as_simulator`, printed as
  `name (model)`).
- `mobilegen.ios_deploy`: split and parse the concatenated JSON events of
  `ios-deploy --json` (`parse_events`) and turn a detection run into a
  sorted device list (`parse_device_list`). An unknown device arch raises
  `ArchInvalid`.
- `mobilegen.simctl`: parse `simctl list --json devices available` output
  into the iOS simulators it lists (`parse_simulator_list`), and turn one
  into a deployable `Device` with `SimulatorDevice.to_device`.
- `mobilegen.bicycle.engine`: a Handlebars-style template engine
  (`parse_template`, `Template.render`, `html_escape`, `EscapeFn`). It
  supports `{{var}}`, unescaped `{{{var}}}`, comments, `~` whitespace
  trimming, `if`/`unless`/`each`/`with` blocks with `else`, `@index`,
  `@first`, `@last`, `@key`, `@root`, `../` paths and plain helper functions.
- `mobilegen.bicycle.traverse`: walk a template tree and plan the actions
  that reproduce it (`traverse`, `Action`, `ActionKind`, `no_transform`).
- `mobilegen.bicycle.bicycle`: `Bicycle`, a strict renderer (an unknown
  variable raises `RenderingError`) that also carries out those actions
  (`process`, `filter_and_process`, `process_actions`, `process_action`,
  `transform_path`); failures raise `ProcessingError`.
- `mobilegen.plist`: the raw `apple` configuration section (`RawConfig`,
  read from kebab-case keys with `RawConfig.from_dict`), plist key/value
  pairs (`PlistPair`, `PlistDictionary`, `parse_plist_value`,
  `value_to_string`, `pair_to_string`) and `raw_from_teams`.
- `mobilegen.apple_config`: platform metadata (`Platform`,
  `platform_from_dict`, `Metadata`, `metadata_from_dict`, `BuildScript`) and
  the bundle version cross-check `version_info_from_raw`, which raises
  `ConfigError`.

## Installing

```
pip install .
```

Install the test extra and run the suite with:

```
pip install ".[test]"
pytest
```

## Examples

Version numbers:

```python
from mobilegen.version_number import parse_version_number

version = parse_version_number("1.2.3")
version.push_extra(7)
print(version)  # 1.2.3.7
```

Looking up a target by architecture:

```python
from mobilegen.target import for_arch

target = for_arch("arm64")
print(target.triple)  # aarch64-apple-ios
```

Rendering a template and generating a project tree:

```python
from mobilegen.bicycle.bicycle import Bicycle

bike = Bicycle()
print(bike.render("Hello {{name}}!", lambda data: data.insert("name", "Shinji")))

bike.process("templates/xcode", "gen/apple", lambda data: data.insert("app-name", "demo"))
```

Files ending in `.hbs` are rendered and written without that extension;
all other files are copied. Directory and file names may contain template
expressions as well.

## What it does not do

There is no command-line tool. The package does not run `xcodebuild`,
`ios-deploy`, `simctl`, `security` or `system_profiler`, and it does not
set up the compiler environment for building the Rust static library; you
run those tools yourself and pass their output to the parsing functions
here.