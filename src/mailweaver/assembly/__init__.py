from mailweaver.assembly.assembler import DocumentAssembler, block_markup
from mailweaver.assembly.default_content import DefaultContentFolder
from mailweaver.assembly.template import wrap_document

__all__ = ["DocumentAssembler", "DefaultContentFolder", "block_markup", "wrap_document"]
