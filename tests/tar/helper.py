import io
import tarfile


def assertTarFileContent(test_class, data, content):
  """Assert that tar archive contains exactly the entry described by `content`.

  Args:
      data: the bytes of the TAR archive to test.
      content: an array describing the expected content of the TAR file.
          Each entry in that list should be a dictionary where each field
          is a field to test in the corresponding TarInfo. For
          testing the presence of a file "x", then the entry could simply
          be `{"name": "x"}`, the missing field will be ignored. To match
          the content of a file entry, use the key "data". To match the
          entry kind, use the key "type".
  """
  got_names = []
  with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as f:
    for current in f:
      got_names.append(getattr(current, "name"))

  with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as f:
    i = 0
    for current in f:
      error_msg = "Extraneous file at end of archive: %s" % current.name
      test_class.assertLess(i, len(content), error_msg)
      for k, v in content[i].items():
        if k == "data":
          value = f.extractfile(current).read()
        else:
          value = getattr(current, k)
        error_msg = " ".join([
            "Value `%s` for key `%s` of file" % (value, k),
            "%s does not match expected value `%s`" % (current.name, v),
            ])
        error_msg += str(got_names)
        test_class.assertEqual(value, v, error_msg)
      i += 1
    if i < len(content):
      test_class.fail("Missing file %s in archive %s" % (content[i], got_names))


def tarNames(data):
  """Return the entry names of a tar archive, in order."""
  with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as f:
    return [info.name for info in f]
