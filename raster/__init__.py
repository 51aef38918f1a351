"""
Raster algorithms operating on PixelBuffer.

Modules:
- convolution: Kernel filtering (normalized, threshold smoothing, Laplacian)
- rasterizer: Line scan conversion (DDA, Bresenham, Wu)
- curves: Bézier evaluation, adaptive flattening, splines
- compositor: Bilinear rotation and alpha compositing
- rle: Run-length codec and quantization
- adjustments: Grayscale, saturation, hue and red-eye correction
- patterns: Procedural test images
"""
