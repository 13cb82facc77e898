"""A small Handlebars-style template engine and template-tree processor."""